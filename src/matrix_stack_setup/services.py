"""Service catalog and docker-compose manifest for the Matrix stack."""

from typing import Dict

from .config import dump_yaml

DOCKER_NETWORK_NAME = "matrix-network"

# Container images for every service in the stack
IMAGES = {
    "db": "postgres:15-alpine",
    "redis": "redis:7-alpine",
    "synapse": "matrixdotorg/synapse:latest",
    "element": "vectorim/element-web:latest",
    "nginx": "nginx:alpine",
    "auth-service": "ghcr.io/element-hq/lk-jwt-service:latest",
    "livekit": "livekit/livekit-server:latest",
}


def _service(name: str, **kwargs) -> Dict:
    return {
        "image": IMAGES[name],
        "restart": kwargs.pop("restart", "always"),
        **kwargs,
        "networks": [DOCKER_NETWORK_NAME],
    }


def build_services(settings, secrets) -> Dict:
    """Build the compose ``services`` mapping.

    Database, cache and LiveKit credentials here must match the ones baked
    into homeserver.yaml and config.yaml.
    """
    return {
        "db": _service(
            "db",
            environment={
                "POSTGRES_USER": secrets.postgres_user,
                "POSTGRES_PASSWORD": secrets.postgres_password,
                "POSTGRES_DB": secrets.postgres_db,
                "POSTGRES_INITDB_ARGS": "--lc-collate=C --lc-ctype=C --encoding=UTF8",
            },
            volumes=["./data/postgres:/var/lib/postgresql/data"],
        ),
        "redis": _service(
            "redis",
            command=f"redis-server --requirepass {secrets.redis_password}",
        ),
        "synapse": _service(
            "synapse",
            volumes=["./data/synapse:/data"],
            working_dir="/data",
            depends_on=["db", "redis"],
        ),
        "element": _service(
            "element",
            volumes=["./element-config.json:/app/config.json:ro"],
        ),
        "nginx": _service(
            "nginx",
            ports=["80:80", "443:443"],
            volumes=[
                "./nginx:/etc/nginx/conf.d:ro",
                "/etc/letsencrypt:/etc/letsencrypt:ro",
            ],
            depends_on=["synapse", "element", "auth-service", "livekit"],
        ),
        "auth-service": _service(
            "auth-service",
            restart="unless-stopped",
            container_name="element-call-jwt",
            hostname="auth-server",
            environment=[
                "LK_JWT_PORT=8080",
                f"LIVEKIT_URL=https://{settings.domain}/livekit/sfu",
                f"LIVEKIT_KEY={secrets.livekit_key}",
                f"LIVEKIT_SECRET={secrets.livekit_secret}",
            ],
            ports=["8070:8080"],
        ),
        "livekit": _service(
            "livekit",
            restart="unless-stopped",
            container_name="element-call-livekit",
            command="--config /etc/livekit.yaml",
            ports=[
                "7880:7880/tcp",
                "7881:7881/tcp",
                "7882:7882/tcp",
                "50100-50200:50100-50200/udp",
            ],
            volumes=["./config.yaml:/etc/livekit.yaml:ro"],
        ),
    }


def generate_docker_compose(settings, secrets) -> str:
    """Generate docker-compose.yml."""
    manifest = {
        "version": "3.8",
        "services": build_services(settings, secrets),
        "networks": {DOCKER_NETWORK_NAME: {"driver": "bridge"}},
    }
    return dump_yaml(manifest)
