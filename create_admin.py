from foodtracker import create_app
from foodtracker.extensions import db
from foodtracker.models.role import Role
from foodtracker.models.user import User
from foodtracker.utils.auth import hash_password
from foodtracker.utils.enums import UserRole

app = create_app()

with app.app_context():
    admin_email = app.config.get('ADMIN_EMAIL')
    admin_password = app.config.get('ADMIN_PASSWORD')
    if not admin_email or not admin_password:
        raise SystemExit('Set ADMIN_EMAIL and ADMIN_PASSWORD first')

    # Ensure ADMIN role exists
    admin_role = Role.query.filter_by(name=UserRole.ADMIN.value).first()
    if not admin_role:
        admin_role = Role(name=UserRole.ADMIN.value, description='Administrator')
        db.session.add(admin_role)
        db.session.commit()
        print('Created ADMIN role')
    else:
        print('ADMIN role already exists')

    # Ensure admin user exists
    admin_user = User.query.filter_by(email=admin_email.strip().lower()).first()
    if not admin_user:
        admin_user = User(
            name='Admin User',
            email=admin_email.strip().lower(),
            password=hash_password(admin_password),
            role=admin_role
        )
        db.session.add(admin_user)
        db.session.commit()
        print('Created admin user')
    else:
        print('Admin user already exists')
