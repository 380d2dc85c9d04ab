"""cibash — shell highlighting for GitHub Actions and GitLab CI YAML."""

__version__ = "0.1.0"
