# Links users to their clinic, specialty and avatar file

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('authz', '0001_initial'),
        ('catalog', '0001_initial'),
        ('core', '0001_initial'),
        ('documents', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='user',
            name='clinic',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='staff', to='core.clinic'),
        ),
        migrations.AddField(
            model_name='user',
            name='specialty',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='doctors', to='catalog.specialty'),
        ),
        migrations.AddField(
            model_name='user',
            name='avatar',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='documents.file'),
        ),
        migrations.AddIndex(
            model_name='user',
            index=models.Index(fields=['clinic'], name='idx_user_clinic'),
        ),
        migrations.AddIndex(
            model_name='user',
            index=models.Index(fields=['specialty'], name='idx_user_specialty'),
        ),
    ]
