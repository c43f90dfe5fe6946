# Initial documents schema: blob-backed files

import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('file', models.CharField(help_text='Object key in MinIO', max_length=512, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('type', models.CharField(max_length=60)),
                ('subtype', models.CharField(max_length=120)),
                ('size_bytes', models.BigIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'db_table': 'file',
            },
        ),
    ]
