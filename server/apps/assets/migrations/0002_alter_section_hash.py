from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('assets', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='section',
            name='hash',
            field=models.CharField(help_text='Content hash, MD5 of origin text and description by default', max_length=64, unique=True),
        ),
    ]
