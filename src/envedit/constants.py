"""Application-wide constants."""

DEFAULT_APP: str = "billing-api"

# Per-app mock releases, in the shape accepted by ``Release.model_validate``.
MOCK_RELEASES: dict[str, dict] = {
    "billing-api": {
        "name": "apps/billing-api/releases/7f3c2a",
        "artifacts": ["artifacts/billing-api-slug-42"],
        "labels": {"git.commit": "a1b2c3d", "team": "payments"},
        "processes": {
            "web": {"args": ["bin/web"], "ports": [{"port": 8080, "proto": "tcp"}]},
            "worker": {"args": ["bin/worker", "--queue", "invoices"]},
        },
        "env": [
            ("APP_ENV", "production"),
            ("DATABASE_URL", "postgres://billing:p@ssw0rd@db.prod.internal:5432/billing"),
            ("REDIS_URL", "redis://cache.prod.internal:6379/0"),
            ("STRIPE_API_KEY", "sk-live-4fGhJ8kLmNpQrStUvWxYz"),
            ("LOG_LEVEL", "info"),
        ],
    },
    "dashboard": {
        "name": "apps/dashboard/releases/19bd04",
        "artifacts": ["artifacts/dashboard-image-3"],
        "labels": {},
        "processes": {"web": {"args": ["bin/dashboard"]}},
        "env": [
            ("API_BASE_URL", "https://controller.example.com"),
            ("SESSION_SECRET", "s3cr3t-dashboard"),
        ],
    },
}
