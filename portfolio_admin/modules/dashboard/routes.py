"""
Admin Dashboard Routes
======================

Dashboard page and the statistics endpoint behind it.
"""

from flask import jsonify, render_template

from . import dashboard_bp
from ..projects.database import ProjectDatabase
from ..settings.database import CategoryDatabase
from ..work_experience.database import WorkExperienceDatabase
from ...core.logging_service import LoggingService

# Stat key for each category type
_STAT_KEYS = {
    'product': 'products',
    'software': 'software',
    'content': 'content',
    'innovation': 'innovation',
}


def get_dashboard_stats():
    """Project counts per category (either stored reference form) plus activity"""
    stats = {key: ProjectDatabase.count_by_category(category) for category, key in _STAT_KEYS.items()}
    stats['workExperiences'] = WorkExperienceDatabase.count()
    stats['errorsLast24h'] = LoggingService.count_recent_errors(hours=24)
    return stats


@dashboard_bp.route('/api/admin/dashboard/stats')
def dashboard_stats():
    return jsonify({'stats': get_dashboard_stats()})


@dashboard_bp.route('/admin')
@dashboard_bp.route('/admin/dashboard')
def dashboard():
    """Admin dashboard"""
    return render_template('dashboard/dashboard.html',
                           categories=CategoryDatabase.get_categories_map(),
                           stat_keys=_STAT_KEYS)
