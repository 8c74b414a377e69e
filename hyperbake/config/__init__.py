# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/config/__init__.py
from .template import BuildResult, Template, TemplateError

__all__ = ["BuildResult", "Template", "TemplateError"]
