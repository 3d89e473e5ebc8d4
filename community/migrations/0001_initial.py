import uuid

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
import pytz
from django.conf import settings
from django.db import migrations, models


CONTENT_STATUS_CHOICES = [('active', 'Active'), ('moderated', 'Moderated'), ('deleted', 'Deleted')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('anonymous_username', models.CharField(blank=True, help_text='Generated handle used on anonymous posts and in chat', max_length=50)),
                ('timezone', models.CharField(choices=[(tz, tz) for tz in pytz.all_timezones], default='UTC', help_text="User's preferred timezone for display", max_length=100)),
                ('last_seen', models.DateTimeField(blank=True, default=django.utils.timezone.now, help_text='Last activity timestamp for online status', null=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='UserRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('user', 'User'), ('moderator', 'Moderator'), ('admin', 'Admin')], default='user', help_text='Moderation role', max_length=10)),
                ('granted_at', models.DateTimeField(auto_now=True, help_text='When the role was last granted')),
                ('granted_by', models.ForeignKey(blank=True, help_text='Admin who granted this role', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='granted_roles', to=settings.AUTH_USER_MODEL)),
                ('user', models.OneToOneField(help_text='User this role belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='user_role', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Post',
            fields=[
                ('status', models.CharField(choices=CONTENT_STATUS_CHOICES, db_index=True, default='active', help_text='Visibility status', max_length=10)),
                ('moderation_reason', models.TextField(blank=True, help_text='Why the content was moderated')),
                ('moderated_at', models.DateTimeField(blank=True, help_text='When the status was last changed by a moderator', null=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(help_text='Post title', max_length=200)),
                ('content', models.TextField(help_text='Post text content')),
                ('category', models.CharField(db_index=True, default='general', help_text='Post category', max_length=50)),
                ('is_anonymous', models.BooleanField(default=True, help_text='Hide author identity behind a generated handle')),
                ('anonymous_username', models.CharField(blank=True, help_text='Handle shown for anonymous posts', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Last edit timestamp')),
                ('author', models.ForeignKey(help_text='Author of this post', on_delete=django.db.models.deletion.CASCADE, related_name='posts', to=settings.AUTH_USER_MODEL)),
                ('moderated_by', models.ForeignKey(blank=True, help_text='Moderator who last changed the status', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Comment',
            fields=[
                ('status', models.CharField(choices=CONTENT_STATUS_CHOICES, db_index=True, default='active', help_text='Visibility status', max_length=10)),
                ('moderation_reason', models.TextField(blank=True, help_text='Why the content was moderated')),
                ('moderated_at', models.DateTimeField(blank=True, help_text='When the status was last changed by a moderator', null=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('content', models.TextField(help_text='Comment text content')),
                ('is_anonymous', models.BooleanField(default=True, help_text='Hide author identity behind a generated handle')),
                ('anonymous_username', models.CharField(blank=True, help_text='Handle shown for anonymous comments', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Last edit timestamp')),
                ('author', models.ForeignKey(help_text='Comment author', on_delete=django.db.models.deletion.CASCADE, related_name='comments', to=settings.AUTH_USER_MODEL)),
                ('moderated_by', models.ForeignKey(blank=True, help_text='Moderator who last changed the status', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('parent', models.ForeignKey(blank=True, help_text='Parent comment for nested replies', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='replies', to='community.comment')),
                ('post', models.ForeignKey(help_text='Post being commented on', on_delete=django.db.models.deletion.CASCADE, related_name='comments', to='community.post')),
            ],
            options={
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='Reaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reaction_type', models.CharField(choices=[('upvote', 'Upvote'), ('heart', 'Heart'), ('hug', 'Hug')], help_text='Kind of reaction', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('comment', models.ForeignKey(blank=True, help_text='Comment reacted to', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='reactions', to='community.comment')),
                ('post', models.ForeignKey(blank=True, help_text='Post reacted to', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='reactions', to='community.post')),
                ('user', models.ForeignKey(help_text='User who reacted', on_delete=django.db.models.deletion.CASCADE, related_name='reactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('comment__isnull', True), ('post__isnull', False)),
                            models.Q(('comment__isnull', False), ('post__isnull', True)),
                            _connector='OR',
                        ),
                        name='reaction_single_target',
                    ),
                    models.UniqueConstraint(condition=models.Q(('post__isnull', False)), fields=('user', 'post', 'reaction_type'), name='unique_post_reaction'),
                    models.UniqueConstraint(condition=models.Q(('comment__isnull', False)), fields=('user', 'comment', 'reaction_type'), name='unique_comment_reaction'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Report',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reason', models.CharField(help_text="Short reason, e.g. 'harassment'", max_length=100)),
                ('description', models.TextField(blank=True, help_text='Free-text details or reviewer notes')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('reviewed', 'Reviewed'), ('resolved', 'Resolved'), ('dismissed', 'Dismissed')], db_index=True, default='pending', help_text='Review status', max_length=10)),
                ('reviewed_at', models.DateTimeField(blank=True, help_text='Review timestamp', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('comment', models.ForeignKey(blank=True, help_text='Reported comment', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='reports', to='community.comment')),
                ('post', models.ForeignKey(blank=True, help_text='Reported post', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='reports', to='community.post')),
                ('reporter', models.ForeignKey(help_text='User who filed the report', on_delete=django.db.models.deletion.CASCADE, related_name='reports_filed', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, help_text='Moderator who reviewed the report', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reports_reviewed', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ChatRoom',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Room name', max_length=100)),
                ('description', models.TextField(blank=True, help_text='What the room is about')),
                ('category', models.CharField(blank=True, help_text='Room category', max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Creation timestamp')),
                ('max_users', models.PositiveIntegerField(default=50, help_text='Maximum simultaneous participants')),
                ('is_private', models.BooleanField(default=False, help_text='Hidden from the room list; joinable by code')),
                ('room_code', models.CharField(blank=True, help_text='Share code for private rooms', max_length=6, null=True, unique=True)),
                ('is_active', models.BooleanField(default=True, help_text='False once the room is closed')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created the room', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_rooms', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ChatRoomParticipant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('username', models.CharField(help_text='Handle used in this room', max_length=50)),
                ('is_online', models.BooleanField(default=True, help_text='Currently in the room')),
                ('last_seen', models.DateTimeField(default=django.utils.timezone.now, help_text='Last heartbeat')),
                ('room', models.ForeignKey(help_text='Room joined', on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='community.chatroom')),
                ('user', models.ForeignKey(help_text='Participating user', on_delete=django.db.models.deletion.CASCADE, related_name='room_participations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'unique_together': {('room', 'user')},
            },
        ),
        migrations.CreateModel(
            name='ChatMessage',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('username', models.CharField(help_text='Handle shown next to the message', max_length=50)),
                ('content', models.TextField(help_text='Message text')),
                ('is_system', models.BooleanField(default=False, help_text='Join/leave notices')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='Creation timestamp')),
                ('room', models.ForeignKey(help_text='Room this message belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='messages', to='community.chatroom')),
                ('user', models.ForeignKey(blank=True, help_text='Sender', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='chat_messages', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='AnonymousFeedback',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('feedback_id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Random identifier not linked to any user', unique=True)),
                ('submission_date', models.DateField(db_index=True, default=django.utils.timezone.localdate, help_text='Day of submission')),
                ('satisfaction_rating', models.CharField(choices=[('very_satisfied', 'Very Satisfied'), ('satisfied', 'Satisfied'), ('neutral', 'Neutral'), ('dissatisfied', 'Dissatisfied'), ('very_dissatisfied', 'Very Dissatisfied')], help_text='Overall satisfaction', max_length=20)),
                ('usage_frequency', models.CharField(choices=[('daily', 'Multiple times a day'), ('few_times_week', 'A few times a week'), ('weekly', 'About once a week'), ('monthly', 'A few times a month'), ('rarely', 'Rarely'), ('first_time', 'This is my first time')], help_text='How often the platform is used', max_length=20)),
                ('feature_rating', models.JSONField(blank=True, default=dict, help_text='Ratings keyed by feature: chat, aiSupport, community')),
                ('improvement_areas', models.JSONField(blank=True, default=list, help_text='Areas the respondent wants improved')),
                ('feature_request', models.CharField(blank=True, help_text='Requested feature', max_length=500)),
                ('general_feedback', models.TextField(blank=True, help_text='Free-form feedback', max_length=1000)),
            ],
            options={
                'ordering': ['-submission_date', '-id'],
            },
        ),
    ]
