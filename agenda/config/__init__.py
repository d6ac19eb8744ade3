from .settings_loader import load_settings, get_setting

__all__ = [
    "load_settings"
    , "get_setting"
    ,
]
