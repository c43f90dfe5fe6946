# An exam request with results can no longer be deleted underneath them

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ('clinical', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='examresult',
            name='exam_request',
            field=models.ForeignKey(
                on_delete=django.db.models.deletion.PROTECT,
                related_name='results',
                to='clinical.examrequest',
            ),
        ),
    ]
