"""
Portfolio Admin
===============

Run the admin console locally.

Run with:
    python app.py

Visit:
    http://localhost:5000/admin        - Admin dashboard
    http://localhost:5000/admin/login  - Admin login

Set FLASK_DEBUG=1 for a local run over plain HTTP; it also turns off
Secure session cookies.

Create the first admin with:
    flask --app app create-admin --username admin
"""

from portfolio_admin import create_app
from portfolio_admin.core.config import Config

app = create_app()


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Portfolio Admin")
    print("=" * 60)
    print(f"Admin Panel:     http://localhost:{Config.port}/admin")
    print(f"Admin Login:     http://localhost:{Config.port}/admin/login")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=app.debug)
