"""
Category Catalogue
==================

The fixed set of project categories, their default titles and the colour
palettes an admin can pick from.
"""

CATEGORY_TYPES = ('product', 'software', 'content', 'innovation')

CATEGORY_CONFIG = {
    'product': {
        'title': 'Product Projects',
        'description': 'Manage your product portfolio projects',
    },
    'software': {
        'title': 'Software Projects',
        'description': 'Manage your software development projects',
    },
    'content': {
        'title': 'Content Projects',
        'description': 'Manage your content and media projects',
    },
    'innovation': {
        'title': 'Innovation Projects',
        'description': 'Manage your innovation and research projects',
    },
}

COLOR_PALETTES = {
    'ocean-depths': {
        'name': 'Ocean Depths',
        'primary': '#0EA5E9', 'secondary': '#FFA726', 'accent': '#E0F2FE',
        'muted': 'rgba(14, 165, 233, 0.2)',
    },
    'forest-haven': {
        'name': 'Forest Haven',
        'primary': '#059669', 'secondary': '#9333EA', 'accent': '#86EFAC',
        'muted': 'rgba(5, 150, 105, 0.2)',
    },
    'sunset-glow': {
        'name': 'Sunset Glow',
        'primary': '#F97316', 'secondary': '#2563EB', 'accent': '#FED7AA',
        'muted': 'rgba(249, 115, 22, 0.2)',
    },
    'royal-purple': {
        'name': 'Royal Purple',
        'primary': '#7C3AED', 'secondary': '#FBBF24', 'accent': '#DDD6FE',
        'muted': 'rgba(124, 58, 237, 0.2)',
    },
    'ruby-fusion': {
        'name': 'Ruby Fusion',
        'primary': '#DC2626', 'secondary': '#0891B2', 'accent': '#FEE2E2',
        'muted': 'rgba(220, 38, 38, 0.2)',
    },
    'arctic-aurora': {
        'name': 'Arctic Aurora',
        'primary': '#2DD4BF', 'secondary': '#E11D48', 'accent': '#CCFBF1',
        'muted': 'rgba(45, 212, 191, 0.2)',
    },
    'golden-dawn': {
        'name': 'Golden Dawn',
        'primary': '#D97706', 'secondary': '#4F46E5', 'accent': '#FEF3C7',
        'muted': 'rgba(217, 119, 6, 0.2)',
    },
    'cherry-blossom': {
        'name': 'Cherry Blossom',
        'primary': '#DB2777', 'secondary': '#059669', 'accent': '#FCE7F3',
        'muted': 'rgba(219, 39, 119, 0.2)',
    },
    'electric-indigo': {
        'name': 'Electric Indigo',
        'primary': '#4F46E5', 'secondary': '#EA580C', 'accent': '#E0E7FF',
        'muted': 'rgba(79, 70, 229, 0.2)',
    },
    'midnight-sea': {
        'name': 'Midnight Sea',
        'primary': '#1E40AF', 'secondary': '#B45309', 'accent': '#BFDBFE',
        'muted': 'rgba(30, 64, 175, 0.2)',
    },
}

_DEFAULT_PALETTES = {
    'product': 'forest-haven',
    'software': 'sunset-glow',
    'content': 'royal-purple',
    'innovation': 'cherry-blossom',
}

# Fields an admin may change on a category document
EDITABLE_FIELDS = ('title', 'description', 'enabled', 'colorPalette')


def default_palette_for(category_type):
    return _DEFAULT_PALETTES.get(category_type, 'ocean-depths')


def default_category(category_type):
    """The category document used when none is stored"""
    config = CATEGORY_CONFIG[category_type]
    return {
        '_id': '',
        'category': category_type,
        'title': config['title'],
        'description': config['description'],
        'enabled': True,
        'colorPalette': default_palette_for(category_type),
    }


def is_category_type(value):
    return isinstance(value, str) and value in CATEGORY_TYPES


def is_palette(value):
    return isinstance(value, str) and value in COLOR_PALETTES
