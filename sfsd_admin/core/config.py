"""Configuración central de la aplicación (Pydantic Settings).

- Carga variables desde .env en la raíz del proyecto.
- Agrupa ajustes por área: App, CORS, Mongo, Auth/JWT, Roles, Cloudinary, Mantenimiento.
"""
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resuelve el .env ubicado en la raíz del proyecto (independiente del CWD)
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    """Conjunto de variables de configuración con valores por defecto razonables.

    Nota: los valores pueden sobreescribirse vía variables de entorno (.env).
    """
    # App
    app_name: str = "SFSD Admin API"
    api_prefix: str = "/api"

    # CORS (frontend Vite/React)
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    cors_allow_any: bool = False

    # Mongo
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "sfsd_db"
    mongo_tls_insecure: bool = False
    mongo_tls_allow_invalid_hostnames: bool = False

    # Auth / JWT (tokens emitidos por el proveedor de identidad)
    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = "authenticated"

    # Roles y rangos
    pending_role: str = "pending"
    approved_role: str = "user"
    admin_roles: list[str] = ["admin", "supervisor"]
    executive_ranks: list[str] = ["Commander", "Deputy Commander"]
    # Roles que pueden editar perfiles ajenos (rol, rango, división...)
    profile_editor_roles: list[str] = ["admin", "supervisor"]
    min_password_length: int = 6

    # Cloudinary
    cloudinary_cloud_name: str | None = Field(
        None,
        validation_alias=AliasChoices("CLOUDINARY_CLOUD_NAME", "VITE_CLOUDINARY_CLOUD_NAME"),
    )
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None
    cloudinary_upload_preset_evidence: str | None = Field(
        None,
        validation_alias=AliasChoices("CLOUDINARY_UPLOAD_PRESET", "VITE_CLOUDINARY_UPLOAD_PRESET"),
    )
    cloudinary_upload_preset_avatar: str | None = Field(
        None,
        validation_alias=AliasChoices("CLOUDINARY_AVATAR_UPLOAD_PRESET", "VITE_CLOUDINARY_AVATAR_UPLOAD_PRESET"),
    )

    # Mantenimiento diario (cron)
    cron_secret: str | None = None
    finance_retention_days: int = 40
    vehicle_retention_days: int = 40
    action_log_retention_days: int = 1

    # Rate limit de rutas administrativas (por llamador)
    admin_rate_per_min: int = 30

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # no fallar si hay variables no usadas
        populate_by_name=True,
    )

    # --- Utilidades derivadas / helpers ---
    @property
    def api_prefix_normalized(self) -> str:
        """Devuelve `api_prefix` con formato consistente.

        - Siempre inicia con '/'
        - Sin '/' final (excepto cuando es solo '/')
        - Si está vacío, devuelve ""
        """
        pref = (self.api_prefix or "").strip()
        if not pref:
            return ""
        if not pref.startswith('/'):
            pref = '/' + pref
        if len(pref) > 1 and pref.endswith('/'):
            pref = pref[:-1]
        return pref

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret)


settings = Settings()
