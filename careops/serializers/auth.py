from rest_framework import serializers

class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(error_messages={'required': 'Email and password are required', 'blank': 'Email and password are required'})

    def validate(self, attrs):
        login = (attrs.get('email') or attrs.get('username') or '').strip()
        if not login:
            raise serializers.ValidationError('Email and password are required')
        attrs['login'] = login
        return attrs
