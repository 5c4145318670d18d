"""The single local user profile: role and commission settings."""

ROLES = ('owner', 'employee')
DEFAULT_COMMISSION_RATE = 50


def _to_profile(row):
    return {
        'display_name': row['display_name'] or '',
        'role': row['role'],
        'commission_rate': row['commission_rate'],
        'keeps_cash': bool(row['keeps_cash']),
        'keeps_check': bool(row['keeps_check']),
        'updated_at': row['updated_at'],
    }


def default_profile():
    return {
        'display_name': '',
        'role': 'owner',
        'commission_rate': DEFAULT_COMMISSION_RATE,
        'keeps_cash': True,
        'keeps_check': True,
        'updated_at': None,
    }


def get_profile(conn):
    row = conn.execute('SELECT * FROM profile WHERE id = 1').fetchone()
    if not row:
        return default_profile()
    return _to_profile(row)


def is_owner(profile):
    return profile.get('role') == 'owner'


def update_profile(conn, data):
    """Apply a partial profile update. Raises ValueError on bad role or rate."""
    profile = get_profile(conn)

    if 'display_name' in data:
        profile['display_name'] = (data['display_name'] or '').strip()
    if 'role' in data:
        if data['role'] not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        profile['role'] = data['role']
    if 'commission_rate' in data:
        try:
            rate = int(data['commission_rate'])
        except (TypeError, ValueError):
            raise ValueError('Commission rate must be between 1 and 100')
        if rate < 1 or rate > 100:
            raise ValueError('Commission rate must be between 1 and 100')
        profile['commission_rate'] = rate
    for flag in ('keeps_cash', 'keeps_check'):
        if flag in data:
            profile[flag] = bool(data[flag])

    conn.execute(
        '''INSERT INTO profile (id, display_name, role, commission_rate, keeps_cash, keeps_check)
           VALUES (1, ?, ?, ?, ?, ?)
           ON CONFLICT(id) DO UPDATE SET display_name = excluded.display_name,
               role = excluded.role, commission_rate = excluded.commission_rate,
               keeps_cash = excluded.keeps_cash, keeps_check = excluded.keeps_check,
               updated_at = datetime('now','localtime')''',
        (profile['display_name'], profile['role'], profile['commission_rate'],
         int(profile['keeps_cash']), int(profile['keeps_check']))
    )
    return get_profile(conn)
