import re

from django.contrib.auth.models import User
from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from user.models import Role, UserProfile

USERNAME_RE = re.compile(r'^\w+$')


def validate_password_strength(value):
    if len(value) < 6:
        raise serializers.ValidationError('Password must be at least 6 characters.')
    if not re.search(r'[A-Za-z]', value) or not re.search(r'\d', value):
        raise serializers.ValidationError('Password must contain at least one letter and one digit.')
    return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField()


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user reference nested inside tasks, works and assets."""
    real_name = serializers.CharField(source='profile.real_name', read_only=True, default='')

    class Meta:
        model = User
        fields = ('id', 'username', 'real_name')


class UserContactSerializer(UserSummarySerializer):
    class Meta(UserSummarySerializer.Meta):
        fields = UserSummarySerializer.Meta.fields + ('email',)


class ProfileSerializer(serializers.ModelSerializer):
    avatar = serializers.SerializerMethodField()
    social_links = serializers.DictField(read_only=True)

    class Meta:
        model = UserProfile
        fields = ('role', 'real_name', 'avatar', 'bio', 'social_links', 'join_date')

    def get_avatar(self, obj):
        if obj.avatar:
            request = self.context.get('request')
            if request is not None:
                return request.build_absolute_uri(obj.avatar.url)
            return obj.avatar.url
        return None


class UserSerializer(serializers.ModelSerializer):
    profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'is_active', 'last_login', 'date_joined', 'profile')

    def get_profile(self, obj):
        if hasattr(obj, 'profile') and obj.profile:
            return ProfileSerializer(obj.profile, context=self.context).data
        return None


class PublicUserSerializer(UserSerializer):
    """Profile visible to anyone; no email, no account state."""

    class Meta(UserSerializer.Meta):
        fields = ('id', 'username', 'date_joined', 'profile')


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(
        min_length=2,
        max_length=20,
        validators=[UniqueValidator(User.objects.all(), message='Username is already taken.')],
    )
    email = serializers.EmailField(
        validators=[UniqueValidator(User.objects.all(), lookup='iexact', message='Email is already registered.')],
    )
    password = serializers.CharField(write_only=True)
    real_name = serializers.CharField(min_length=2, max_length=50)

    def validate_username(self, value):
        if not USERNAME_RE.match(value):
            raise serializers.ValidationError('Username may only contain letters, digits and underscores.')
        return value

    def validate_email(self, value):
        return value.lower()

    def validate_password(self, value):
        return validate_password_strength(value)

    @transaction.atomic
    def create(self, validated_data):
        role = validated_data.pop('role', Role.USER)
        real_name = validated_data.pop('real_name')
        user = User.objects.create_user(
            username=validated_data['username'],
            email=validated_data['email'],
            password=validated_data['password'],
        )
        # Created by the post_save receiver and cached on the user
        profile = user.profile
        profile.role = role
        profile.real_name = real_name
        profile.save(update_fields=['role', 'real_name'])
        return user


class AdminUserCreateSerializer(RegisterSerializer):
    role = serializers.ChoiceField(choices=Role.choices, default=Role.USER)


class ProfileUpdateSerializer(serializers.ModelSerializer):
    real_name = serializers.CharField(min_length=2, max_length=50, required=False)
    social_links = serializers.DictField(child=serializers.CharField(allow_blank=True, max_length=255), required=False)

    class Meta:
        model = UserProfile
        fields = ('real_name', 'bio', 'avatar', 'social_links')

    def validate_social_links(self, value):
        unknown = set(value) - {'instagram', 'weibo', 'bilibili'}
        if unknown:
            raise serializers.ValidationError(f"Unknown social links: {', '.join(sorted(unknown))}")
        return value

    def update(self, instance, validated_data):
        for network, url in validated_data.pop('social_links', {}).items():
            setattr(instance, network, url)
        return super().update(instance, validated_data)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField()
    new_password = serializers.CharField()

    def validate_current_password(self, value):
        user = self.context['request'].user
        if not user.check_password(value):
            raise serializers.ValidationError('Current password is incorrect.')
        return value

    def validate_new_password(self, value):
        return validate_password_strength(value)


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()

    def to_internal_value(self, data):
        # Only real booleans; "false" or 0 would silently pass BooleanField coercion
        if not isinstance(data, dict) or not isinstance(data.get('is_active'), bool):
            raise serializers.ValidationError({'is_active': ['Must be a boolean.']})
        return super().to_internal_value(data)


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)
