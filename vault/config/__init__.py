from vault.config.settings import settings

__all__ = ["settings"]
