import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='MonthlyReport',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('month', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(12)])),
                ('year', models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1900), django.core.validators.MaxValueValidator(2100)])),
                ('summary', models.TextField(blank=True, max_length=5000, null=True)),
                ('comments', models.TextField(blank=True, max_length=5000, null=True)),
                ('next_month_plan', models.TextField(blank=True, max_length=5000, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='monthly_reports', to='students.student')),
            ],
            options={
                'verbose_name': 'Monthly report',
                'verbose_name_plural': 'Monthly reports',
                'db_table': 'monthly_reports',
                'ordering': ['-year', '-month'],
                'constraints': [models.UniqueConstraint(fields=('student', 'month', 'year'), name='uniq_report_student_month_year')],
            },
        ),
    ]
