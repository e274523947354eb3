# Generated migration for the records app

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Staff',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('hospital_number', models.CharField(max_length=64, unique=True)),
                ('full_name', models.CharField(max_length=255)),
                ('dob', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, max_length=20)),
                ('telephone', models.CharField(blank=True, max_length=32)),
                ('force_file_number', models.CharField(blank=True, max_length=64)),
                ('station', models.CharField(blank=True, max_length=128)),
                ('rank', models.CharField(blank=True, max_length=64)),
                ('photo', models.CharField(blank=True, max_length=512, null=True)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'staff',
                'db_table': 'staff',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Dependant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('dob', models.DateField(blank=True, null=True)),
                ('relation', models.CharField(blank=True, max_length=64)),
                ('photo', models.CharField(blank=True, max_length=512, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('staff', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='dependants', to='records.staff')),
            ],
            options={
                'db_table': 'dependant',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Visit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date_visit', models.DateField(default=django.utils.timezone.localdate)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('condition', models.CharField(blank=True, max_length=128)),
                ('visit_type', models.CharField(blank=True, max_length=64)),
                ('admitted', models.BooleanField(db_index=True, default=False)),
                ('date_admission', models.DateField(blank=True, null=True)),
                ('outcome', models.CharField(blank=True, choices=[('Recovered', 'Recovered'), ('Discharged', 'Discharged'), ('Died', 'Died'), ('Referred', 'Referred')], db_index=True, max_length=16, null=True)),
                ('referral_destination', models.CharField(blank=True, max_length=255, null=True)),
                ('discharge_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('staff', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='visits', to='records.staff')),
            ],
            options={
                'db_table': 'visit',
                'ordering': ['-date_visit', '-id'],
                'indexes': [models.Index(fields=['staff', 'date_visit'], name='visit_staff_date_idx')],
            },
        ),
    ]
