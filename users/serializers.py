from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from assessments.models import TestAttempt
from certificates.models import Certificate
from .models import Profile

User = get_user_model()


class ProfileSerializer(serializers.ModelSerializer):
    may_take_test = serializers.BooleanField(read_only=True)

    class Meta:
        model = Profile
        fields = [
            'membership_fee_paid', 'payment_status', 'may_take_test',
            'test_completed', 'test_score', 'certificate_issued', 'certificate_url', 'updated_at',
        ]
        # Owned by the payment and grading flows, never by the candidate
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    profile = ProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'role', 'is_staff', 'phone_number', 'bio', 'avatar', 'profile']
        read_only_fields = ['is_staff', 'role']


class AdminUserSerializer(UserSerializer):
    """Admins may change roles and reset passwords."""
    password = serializers.CharField(write_only=True, required=False, validators=[validate_password])

    class Meta(UserSerializer.Meta):
        fields = UserSerializer.Meta.fields + ['password']
        read_only_fields = ['is_staff']

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=['password'])
        return instance


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, validators=[validate_password])

    class Meta:
        model = User
        fields = ['email', 'first_name', 'last_name', 'password', 'role']

    def validate_role(self, value):
        # Self-registration always yields a candidate; admins create other roles
        request = self.context.get('request')
        if value != User.Role.CANDIDATE and not (request and request.user.is_authenticated and request.user.is_admin):
            raise serializers.ValidationError("Only administrators can assign this role.")
        return value

    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            first_name=validated_data['first_name'],
            last_name=validated_data['last_name'],
            role=validated_data.get('role', User.Role.CANDIDATE)
        )
        return user


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserSerializer(self.user).data
        return data


class CandidateListSerializer(serializers.ModelSerializer):
    tests_taken = serializers.SerializerMethodField()
    certificates_earned = serializers.SerializerMethodField()
    last_activity = serializers.SerializerMethodField()
    profile = ProfileSerializer(read_only=True)

    class Meta:
        model = User
        fields = ['id', 'email', 'first_name', 'last_name', 'profile', 'tests_taken', 'certificates_earned', 'last_activity']

    def get_tests_taken(self, obj):
        return TestAttempt.objects.filter(user=obj).count()

    def get_certificates_earned(self, obj):
        return Certificate.objects.filter(attempt__user=obj).count()

    def get_last_activity(self, obj):
        last_attempt = TestAttempt.objects.filter(user=obj).order_by('-completed_at').first()
        if last_attempt:
            return last_attempt.completed_at
        return obj.date_joined
