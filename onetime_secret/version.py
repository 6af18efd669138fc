"""One-time Secret Meta information.
   One-time Secret stores client-encrypted secrets that can be read exactly once.
"""
__title__ = 'onetime_secret'
__description__ = (
   'One-time Secret stores client-encrypted secrets '
   'that can be read exactly once.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/onetime-secret'
