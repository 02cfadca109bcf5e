"""
Portfolio Admin Modules
=======================

Flask blueprint modules that make up the admin console.
"""

__all__ = ['auth', 'basic_info', 'dashboard', 'logs', 'media', 'projects', 'settings', 'work_experience']
