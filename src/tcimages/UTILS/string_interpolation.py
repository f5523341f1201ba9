"""
Utilities for substituting environment variables into configuration text.
"""
import re
from typing import Dict

# $$ | ${VAR} | ${VAR:-default} | ${VAR:+value}
_PATTERN = re.compile(r'\$\$|\$\{([A-Za-z_][A-Za-z0-9_]*)(?::(-|\+)([^}]*))?\}')


class EnvironmentInterpolator:
    """
    Substitutes ${VAR}, ${VAR:-default} and ${VAR:+value} in configuration
    text. ``$$`` produces a literal ``$``.
    """
    @staticmethod
    def interpolate(template: str, context: Dict[str, str]) -> str:
        """
        Interpolates variables in the template using the provided context.

        :param template: Text containing ${VAR} placeholders.
        :param context: Variable values.
        :return: The interpolated text.
        :raises KeyError: If a plain ${VAR} is not set in the context.
        """
        def replace(match):
            if match.group(0) == '$$':
                return '$'

            var_name = match.group(1)
            modifier = match.group(2)
            alt_value = match.group(3)
            value = context.get(var_name)

            if modifier == '-':
                return value if value else alt_value
            if modifier == '+':
                return alt_value if value else ''
            if value is None:
                raise KeyError(var_name)
            return value

        return _PATTERN.sub(replace, template)
