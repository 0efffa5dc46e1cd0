import uuid

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
            name='Notification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=[('plan_invite', 'Plan invite'), ('group_swipe_invite', 'Group swipe invite'), ('rsvp_response', 'RSVP response'), ('swipe_completed', 'Swipe completed'), ('group_swipe_result', 'Group swipe result'), ('plan_confirmed', 'Plan confirmed'), ('plan_completed', 'Plan completed'), ('plan_cancelled', 'Plan cancelled'), ('plan_auto_cancelled', 'Plan auto-cancelled'), ('participant_left', 'Participant left'), ('organizer_delegated', 'Organizer delegated'), ('organizer_changed', 'Organizer changed')], max_length=40)),
                ('title', models.CharField(max_length=200)),
                ('body', models.TextField()),
                ('data', models.JSONField(blank=True, default=dict)),
                ('read', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'read'], name='notif_user_read_idx'),
                    models.Index(fields=['user', 'created_at'], name='notif_user_created_idx'),
                ],
            },
        ),
    ]
