"""
Adapters layer - External integrations (Supabase tables and edge functions).
"""

from .memory_store import LoggingNotifier, MemoryStore
from .supabase_notifier import SupabaseNotifier
from .supabase_store import SupabaseStore

__all__ = ["LoggingNotifier", "MemoryStore", "SupabaseNotifier", "SupabaseStore"]
