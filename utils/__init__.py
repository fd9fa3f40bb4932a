"""
Shared utilities: Supabase access, text-generation client and activity logging.
"""
