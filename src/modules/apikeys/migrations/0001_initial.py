import uuid6
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="APIKey",
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
                ("key", models.CharField(db_index=True, max_length=255)),
                ("client_id", models.CharField(blank=True, default="", max_length=255)),
                ("expiry", models.DateTimeField(blank=True, default=None, null=True)),
                ("revoked", models.BooleanField(default=False)),
            ],
            options={
                "db_table": "apikeys",
            },
        ),
    ]
