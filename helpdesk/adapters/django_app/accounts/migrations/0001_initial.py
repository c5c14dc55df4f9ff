from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserProfileModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('EMPLOYEE', 'Employee'), ('ADMIN_MANAGER', 'Administration Manager'), ('FINANCE_MANAGER', 'Finance Manager'), ('HR_MANAGER', 'HR Manager'), ('SYSTEM_ADMIN', 'System Administrator')], db_index=True, default='EMPLOYEE', help_text='Papel do usuário', max_length=20)),
                ('department', models.CharField(blank=True, choices=[('ADMIN', 'Administration'), ('FINANCE', 'Finance'), ('HR', 'Human Resources')], db_index=True, help_text='Departamento do usuário', max_length=10, null=True)),
                ('user', models.OneToOneField(help_text='Usuário Django', on_delete=django.db.models.deletion.CASCADE, related_name='helpdesk_profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Perfil de Usuário',
                'verbose_name_plural': 'Perfis de Usuário',
                'db_table': 'user_profiles',
            },
        ),
    ]
