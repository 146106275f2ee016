import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProductRecord",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("product_id", models.TextField(unique=True)),
                ("name", models.TextField(blank=True, default="")),
                ("image_closed", models.TextField(blank=True, default="")),
                ("image_open", models.TextField(blank=True, default="")),
                ("description", models.TextField(blank=True, default="")),
                ("story", models.TextField(blank=True, default="")),
                ("sourcing_values", models.JSONField(blank=True, default=list)),
                ("ingredients", models.JSONField(blank=True, default=list)),
                ("allergy_info", models.TextField(blank=True, default="")),
                ("dietary_certifications", models.TextField(blank=True, default="")),
            ],
            options={
                "db_table": "products",
                "ordering": ["id"],
            },
        ),
    ]
