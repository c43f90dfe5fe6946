# Initial clinical schema: diagnostics, prescriptions, referrals, exam requests and results

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('documents', '0001_initial'),
        ('scheduling', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Diagnostic',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('report', models.TextField()),
                ('operation_date', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('condition', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='diagnostics', to='catalog.condition')),
                ('consultation', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='diagnostic', to='scheduling.consultation')),
                ('surgery', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='diagnostics', to='catalog.surgery')),
            ],
            options={
                'verbose_name': 'Diagnostic',
                'verbose_name_plural': 'Diagnostics',
                'db_table': 'diagnostic',
            },
        ),
        migrations.CreateModel(
            name='Prescription',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('issued_on', models.DateTimeField(auto_now_add=True)),
                ('expires_on', models.DateTimeField()),
                ('medicine_amount', models.PositiveIntegerField()),
                ('medicine_frequency', models.PositiveIntegerField()),
                ('medicine_frequency_unit', models.CharField(choices=[('WEEK', 'Week'), ('MONTH', 'Month'), ('DAY', 'Day'), ('HOUR', 'Hour')], max_length=10)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('diagnostic', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prescriptions', to='clinical.diagnostic')),
                ('medicine', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='prescriptions', to='catalog.medicine')),
            ],
            options={
                'verbose_name': 'Prescription',
                'verbose_name_plural': 'Prescriptions',
                'db_table': 'prescription',
                'ordering': ['issued_on'],
                'indexes': [models.Index(fields=['diagnostic'], name='idx_prescription_diagnostic')],
            },
        ),
        migrations.CreateModel(
            name='Referral',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField()),
                ('consultation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='referrals', to='scheduling.consultation')),
                ('specialty', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='referrals', to='catalog.specialty')),
            ],
            options={
                'verbose_name': 'Referral',
                'verbose_name_plural': 'Referrals',
                'db_table': 'referral',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='ExamRequest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('date', models.DateTimeField()),
                ('consultation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='exam_requests', to='scheduling.consultation')),
                ('exam', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='exam_requests', to='catalog.exam')),
            ],
            options={
                'verbose_name': 'Exam Request',
                'verbose_name_plural': 'Exam Requests',
                'db_table': 'exam_request',
                'unique_together': {('consultation', 'exam')},
                'indexes': [models.Index(fields=['consultation'], name='idx_exam_request_consult')],
            },
        ),
        migrations.CreateModel(
            name='ExamResult',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('short_report', models.TextField()),
                ('date', models.DateTimeField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('exam_request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='results', to='clinical.examrequest')),
                ('report', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='documents.file')),
            ],
            options={
                'verbose_name': 'Exam Result',
                'verbose_name_plural': 'Exam Results',
                'db_table': 'exam_result',
                'ordering': ['-date'],
            },
        ),
    ]
