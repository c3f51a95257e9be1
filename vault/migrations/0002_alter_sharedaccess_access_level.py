from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('vault', '0001_initial'),
    ]

    operations = [
        migrations.AlterField(
            model_name='sharedaccess',
            name='access_level',
            field=models.CharField(default='Full Access', max_length=100),
        ),
    ]
