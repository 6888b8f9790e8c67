"""SecretService Meta information.
   SecretService is an asyncio client for the freedesktop.org Secret Service API.
"""
__title__ = 'secretservice'
__description__ = (
   'Asyncio client for the freedesktop.org Secret Service API '
   '(session negotiation, secret transport and prompts).'
)
__version__ = '0.3.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
