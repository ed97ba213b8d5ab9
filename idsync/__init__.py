"""
idsync - identity and session synchronization for the mobile client.

Validates usernames as they are typed and keeps the Supabase data store
authorized against the Clerk identity that is currently signed in.
"""

__version__ = "0.1.0"
