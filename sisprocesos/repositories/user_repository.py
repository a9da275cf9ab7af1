# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Encapsula todo el acceso a usuarios.json
# ==============================================================================

import os
from typing import Any, List, Optional

from sisprocesos.models.entities import User, UserRole
from sisprocesos.repositories.base import EntityRepository


class UserRepository(EntityRepository[User]):
    """
    Repositorio para gestión de usuarios.

    Formato de datos en usuarios.json:
    {
        "next_id": 2,
        "records": {
            "1": {"id": 1, "name": "Ana", "login": "ana", "role": "ADMIN", ...}
        }
    }
    """

    FILE_NAME = 'usuarios.json'

    def __init__(self, base_path: str):
        """
        Inicializa el repositorio de usuarios.

        Args:
            base_path: Carpeta de datos
        """
        super().__init__(os.path.join(base_path, self.FILE_NAME), User)

    def find_by_login(self, login: str) -> Optional[User]:
        """
        Obtiene un usuario por su login (sin distinguir mayúsculas).

        Args:
            login: Nombre de acceso

        Returns:
            Usuario o None
        """
        if not login:
            return None
        wanted = login.strip().lower()
        for user in self.find_all():
            if user.login and user.login.lower() == wanted:
                return user
        return None

    def login_exists(self, login: str, exclude_id: Any = None) -> bool:
        """
        Verifica si un login ya está en uso.

        Args:
            login: Nombre de acceso
            exclude_id: ID del usuario que se está editando (no cuenta)
        """
        user = self.find_by_login(login)
        if user is None:
            return False
        return exclude_id is None or str(user.id) != str(exclude_id)

    def find_all_by_role(self, role: UserRole) -> List[User]:
        """Obtiene lista de usuarios con un perfil específico."""
        return self.find_all_by('role', role)

    def count_by_role(self, role: UserRole) -> int:
        """Cuenta cuántos usuarios tienen un perfil."""
        return len(self.find_all_by_role(role))
