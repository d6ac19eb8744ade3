# agenda/config/settings_loader.py
from dotenv import load_dotenv
from pathlib import Path
from typing import Optional
import os

DEFAULTS = {
    "DB_ECHO": "false",
    "DEFAULT_STORE_TIMEZONE": "America/Argentina/Buenos_Aires",
    "LOG_LEVEL": "DEBUG",
}

def load_settings() -> bool:
    """
    Carrega config/.env (raiz do projeto) para o ambiente.
    Retorna True se o arquivo existir.
    """
    # Caminho absoluto até a raiz do projeto (agenda/config -> agenda -> raiz)
    base_dir = Path(__file__).resolve().parent.parent.parent
    env_path = base_dir / "config" / ".env"

    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=True)
        return True
    return False

def get_setting(key: str, default: Optional[str] = None) -> Optional[str]:
    """Lê uma configuração do ambiente, com fallback para os valores padrão do projeto."""
    value = os.getenv(key)
    if value is None or value == "":
        return default if default is not None else DEFAULTS.get(key)
    return value

def get_bool_setting(key: str) -> bool:
    return str(get_setting(key, "false")).strip().lower() in ("1", "true", "yes", "on")

# Carregar automaticamente quando importar o pacote config
load_settings()
