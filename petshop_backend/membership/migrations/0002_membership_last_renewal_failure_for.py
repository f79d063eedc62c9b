"""
MIGRATION: remember which expiry_date already got the auto-renew-failed e-mail
"""

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("membership", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="membership",
            name="last_renewal_failure_for",
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
