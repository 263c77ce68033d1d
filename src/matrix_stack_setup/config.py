"""Configuration constants and template rendering for Matrix Stack Setup."""

import json
from pathlib import Path

import yaml
from jinja2 import Environment, PackageLoader, select_autoescape

# User settings file, read from the working directory
SETTINGS_FILE = ".env"

DEFAULT_DOMAIN = "matrix.example.com"
DEFAULT_FEDERATION_WHITELIST = "matrix.org"
DEFAULT_MAX_UPLOAD_SIZE = "10M"

LETSENCRYPT_LIVE_DIR = Path("/etc/letsencrypt/live")

# Synapse container runs as this uid/gid
SYNAPSE_UID = 991
SYNAPSE_GID = 991

COMPOSE_FILE = "docker-compose.yml"
LIVEKIT_CONFIG_FILE = "config.yaml"
ELEMENT_CONFIG_FILE = "element-config.json"
NGINX_CONFIG_FILE = "nginx/matrix.conf"
HOMESERVER_CONFIG_FILE = "data/synapse/homeserver.yaml"

DATA_DIRS = ("data/synapse", "data/postgres", "data/certs", "nginx")

# Element Call participant cap advertised to clients
ELEMENT_CALL_PARTICIPANT_LIMIT = 8


def get_jinja_env():
    """Get Jinja2 environment for templates."""
    return Environment(
        loader=PackageLoader("matrix_stack_setup", "templates"),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def dump_yaml(data: dict) -> str:
    """Serialize a config document, preserving key order."""
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)


def generate_livekit_config(settings, secrets) -> str:
    """Generate the LiveKit SFU config.yaml."""
    document = {
        "port": 7880,
        "bind_addresses": ["0.0.0.0"],
        "rtc": {
            "tcp_port": 7881,
            "port_range_start": 50100,
            "port_range_end": 50200,
            "use_external_ip": False,
        },
        "logging": {"level": "info"},
        "turn": {
            "enabled": False,
            "domain": "localhost",
            "cert_file": "",
            "key_file": "",
            "tls_port": 5349,
            "udp_port": 443,
            "external_tls": True,
        },
        "keys": {secrets.livekit_key: secrets.livekit_secret},
    }
    return dump_yaml(document)


def generate_element_config(settings, secrets) -> str:
    """Generate element-config.json for the Element web client."""
    base_url = f"https://{settings.domain}"
    document = {
        "default_server_config": {
            "m.homeserver": {
                "base_url": base_url,
                "server_name": settings.domain,
            },
        },
        "features": {
            "feature_group_calls": True,
            "feature_video_rooms": True,
            "feature_element_call_msc3401": True,
        },
        "element_call": {
            "url": base_url,
            "use_exclusively": True,
            "participant_limit": ELEMENT_CALL_PARTICIPANT_LIMIT,
        },
    }
    return json.dumps(document, indent=4) + "\n"


def generate_nginx_config(settings, secrets) -> str:
    """Generate the nginx reverse proxy rules from template."""
    env = get_jinja_env()
    template = env.get_template("matrix.conf.j2")

    base_url = f"https://{settings.domain}"
    client_wellknown = {
        "m.homeserver": {"base_url": base_url},
        "org.matrix.msc4143.rtc_foci": [
            {"type": "livekit", "livekit_service_url": base_url},
        ],
        "io.element.group_call": {"enabled": True},
    }
    server_wellknown = {"m.server": f"{settings.domain}:443"}

    return template.render(
        domain=settings.domain,
        max_upload_size=settings.max_upload_size,
        letsencrypt_dir=LETSENCRYPT_LIVE_DIR,
        client_wellknown=json.dumps(client_wellknown),
        server_wellknown=json.dumps(server_wellknown),
    )


def generate_homeserver_config(settings, secrets) -> str:
    """Generate the Synapse homeserver.yaml.

    The federation whitelist sits directly after ``serve_server_wellknown``.
    """
    document = {
        "server_name": settings.domain,
        "report_stats": False,
        "max_upload_size": settings.max_upload_size,
        "pid_file": "/data/homeserver.pid",
        "listeners": [
            {
                "port": 8008,
                "resources": [
                    {"compress": False, "names": ["client", "federation"]},
                ],
                "tls": False,
                "type": "http",
                "x_forwarded": True,
            },
        ],
        "database": {
            "name": "psycopg2",
            "args": {
                "user": secrets.postgres_user,
                "password": secrets.postgres_password,
                "database": secrets.postgres_db,
                "host": "db",
                "cp_min": 5,
                "cp_max": 10,
            },
        },
        "redis": {
            "enabled": True,
            "host": "redis",
            "port": 6379,
            "password": secrets.redis_password,
        },
        "serve_server_wellknown": True,
        "federation_domain_whitelist": list(settings.federation_whitelist),
        "registration_shared_secret": secrets.registration_shared_secret,
        "experimental_features": {
            "msc3266_enabled": True,
            "msc4222_enabled": True,
            "msc3401_enabled": True,
            "msc3026_enabled": True,
        },
        "element_call": {
            "url": "http://auth-service:8080",
            "api_key": secrets.livekit_key,
            "api_secret": secrets.livekit_secret,
        },
    }
    return dump_yaml(document)
