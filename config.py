import json
import os

CONFIG_FILE = "config.json"

REQUIRED_KEYS = ["API_URL"]

DEFAULTS = {
    "API_TOKEN": "",
    "REQUEST_TIMEOUT": 10,
    "SHOP_NAME": "POS",
    "LOG_DIR": "logs",
    "LOG_LEVEL": "INFO",
    "PRINT_RECEIPT": False,
    "APPEARANCE_MODE": "light",
}

# Environment wins over the file so a till can be repointed without editing it
ENV_OVERRIDES = {
    "POS_API_URL": "API_URL",
    "POS_API_TOKEN": "API_TOKEN",
}


def load_config(config_file=CONFIG_FILE):
    if not os.path.exists(config_file):
        raise FileNotFoundError(f"Config file {config_file} not found. Expected it in: {os.getcwd()}")
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        with open(config_file, "r", encoding="utf-8") as f:
            lines = f.readlines()
            error_line = lines[e.lineno - 1] if e.lineno <= len(lines) else "Unknown"
        raise ValueError(f"Config file {config_file} is invalid: {e}\nLine {e.lineno}: {error_line.strip()}")

    for env_name, key in ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            config[key] = os.environ[env_name]

    missing_keys = [key for key in REQUIRED_KEYS if not config.get(key)]
    if missing_keys:
        raise KeyError(f"Missing keys in {config_file}: {', '.join(missing_keys)}")

    for key, value in DEFAULTS.items():
        config.setdefault(key, value)
    config["API_URL"] = config["API_URL"].rstrip("/")
    config["REQUEST_TIMEOUT"] = float(config["REQUEST_TIMEOUT"])
    return config
