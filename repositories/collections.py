"""MongoDB collection names, shared by repositories, index setup and DI."""

USERS = "users"
API_KEYS = "api_keys"
OTP_CHALLENGES = "otp_challenges"
PASSWORD_RESET_GRANTS = "password_reset_grants"
SMTP_CREDENTIALS = "smtp_credentials"
