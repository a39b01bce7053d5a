"""Pixelhook: tracking-pixel webhook receiver.

Pixelhook accepts pixel events over HTTP, flattens each event into a
fixed-column row for a Google Sheets log and, when a CRM is configured,
captures qualified leads as CRM contacts.
"""
