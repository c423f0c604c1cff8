import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PlatformSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('site_name', models.CharField(default='CertifyPro', max_length=100)),
                ('support_email', models.EmailField(default='support@certify.example.org', max_length=254)),
                ('default_pass_mark', models.PositiveIntegerField(default=70, help_text='Pass mark percentage for tests without an exam configuration')),
                ('default_exam_duration', models.PositiveIntegerField(default=60, help_text='Default duration in minutes')),
                ('default_question_count', models.PositiveIntegerField(default=30, help_text='Questions drawn from the bank per test')),
                ('certificate_signer_name', models.CharField(default='Director of Certification', max_length=100)),
                ('certificate_signer_title', models.CharField(default='Registrar', max_length=100)),
            ],
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('CREATE', 'Create'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('SUBMIT', 'Test Submitted'), ('CERTIFICATE', 'Certificate Issued'), ('RETAKE', 'Retake Granted'), ('SETTINGS', 'Settings Changed')], max_length=20)),
                ('target_model', models.CharField(help_text='e.g., TestAttempt, User, Certificate', max_length=50)),
                ('target_object_id', models.CharField(blank=True, max_length=100, null=True)),
                ('details', models.TextField(blank=True, help_text='Description of changes')),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('timestamp', models.DateTimeField(auto_now_add=True)),
                ('actor', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-timestamp'],
            },
        ),
    ]
