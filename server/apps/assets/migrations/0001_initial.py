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
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255, unique=True)),
                ('assets_path', models.CharField(blank=True, default='', help_text='Location of the backing asset', max_length=1024)),
                ('type', models.IntegerField(default=0, help_text='Classification tag of the file')),
                ('last_updated', models.DateTimeField(blank=True, default=None, null=True)),
                ('translated', models.PositiveIntegerField(default=0)),
                ('corrected', models.PositiveIntegerField(default=0)),
                ('polished', models.PositiveIntegerField(default=0)),
                ('sections', models.JSONField(blank=True, default=list, help_text='Ordered list of section content hashes')),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Section',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('hash', models.CharField(help_text='MD5 of origin text followed by description', max_length=32, unique=True)),
                ('origin_text', models.TextField()),
                ('desc', models.TextField(blank=True, default='')),
                ('status', models.PositiveSmallIntegerField(choices=[(0, 'New'), (1, 'Translated'), (2, 'Corrected'), (3, 'Polished')], default=0)),
                ('contracted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('contractor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='contracted_sections', to=settings.AUTH_USER_MODEL)),
                ('parents', models.ManyToManyField(blank=True, related_name='linked_sections', to='assets.file')),
            ],
            options={
                'verbose_name': 'Section',
                'verbose_name_plural': 'Sections',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Commit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('text', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='commits', to=settings.AUTH_USER_MODEL)),
                ('section', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='commits', to='assets.section')),
            ],
            options={
                'verbose_name': 'Commit',
                'verbose_name_plural': 'Commits',
                'ordering': ['created_at', 'id'],
            },
        ),
        migrations.AddField(
            model_name='section',
            name='published_commit',
            field=models.ForeignKey(blank=True, help_text='Commit currently used as the canonical translation', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='assets.commit'),
        ),
        migrations.CreateModel(
            name='Contractor',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('count', models.PositiveIntegerField(default=0, help_text='Total sections assigned to the user from this file')),
                ('file', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contractors', to='assets.file')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='contracted_files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Contractor',
                'verbose_name_plural': 'Contractors',
                'constraints': [models.UniqueConstraint(fields=('file', 'user'), name='contractors_file_user_unique')],
            },
        ),
    ]
