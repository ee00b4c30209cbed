import os


class Settings:
    def __init__(self):
        self.app_name = "Invoice Overlay"
        self.api_version = "1.0.0"
        self.environment = "development"
        self.secret_key = os.getenv("INVOICE_OVERLAY_SECRET_KEY", "CHANGE_ME")
        self.SECRET_KEY = self.secret_key
        self.access_token_expire_minutes = 30
        self.ACCESS_TOKEN_EXPIRE_MINUTES = self.access_token_expire_minutes
        self.database_url = os.getenv("INVOICE_OVERLAY_DATABASE_URL", "sqlite:///./invoice_overlay.db")
        self.blob_storage_dir = os.getenv("INVOICE_OVERLAY_BLOB_DIR", "./blob_storage")
        self.pdf_font_name = "Helvetica"
        self.log_level = os.getenv("INVOICE_OVERLAY_LOG_LEVEL", "INFO")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
