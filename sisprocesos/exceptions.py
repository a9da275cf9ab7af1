# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Los servicios solo fabrican dos tipos de error:
#   - ValidationError: campos inválidos o ID ausente en una alteración
#   - AuthenticationError: no hay usuario autenticado en el contexto
# Cualquier otro error (I/O, JSON corrupto) viene del repositorio sin envolver.
# ==============================================================================

from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Union


class FieldError(NamedTuple):
    """Violación de un campo: nombre del campo y mensaje legible."""
    field: str
    message: str


class ValidationError(Exception):
    """
    Excepción lanzada cuando una entidad no pasa la validación.

    Acepta un único campo con su mensaje, o una lista de FieldError
    (en el orden en que fueron detectadas):

        raise ValidationError('id', 'El campo ID es obligatorio')
        raise ValidationError([FieldError('name', 'es obligatorio'), ...])
    """

    def __init__(
        self,
        field_or_errors: Union[str, Iterable[FieldError]],
        message: Optional[str] = None
    ):
        if isinstance(field_or_errors, str):
            errors = [FieldError(field_or_errors, message or 'valor inválido')]
        else:
            errors = [FieldError(*error) for error in field_or_errors]
        self.errors: List[FieldError] = errors
        super().__init__('; '.join(f'{e.field}: {e.message}' for e in errors))

    @property
    def fields(self) -> List[str]:
        """Nombres de los campos con error, en orden."""
        return [e.field for e in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        """Convierte a diccionario (útil para respuestas JSON)."""
        return {
            'error': 'validation',
            'errors': [{'field': e.field, 'message': e.message} for e in self.errors]
        }


class AuthenticationError(Exception):
    """Excepción lanzada cuando se requiere un usuario autenticado y no lo hay."""
    pass
