"""
Token authentication for the export API.

Clients send ``Authorization: Token <key>`` with a key issued by
``rest_framework.authtoken``.  The subclass gives the settings a stable
import path inside the project.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Token'
