"""
서버 모듈 (Telnet, 웹)
"""

from .telnet_server import TelnetServer
from .web_server import WebServer

__all__ = ['TelnetServer', 'WebServer']
