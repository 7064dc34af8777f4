# ===================================
# app/api/deps.py
# ===================================
from app.core.security import get_current_active_user, require_roles
from app.models.user import UserRole

# Toute route de ressource exige un utilisateur actif
require_user = get_current_active_user

require_admin = require_roles(UserRole.ADMIN.value)
