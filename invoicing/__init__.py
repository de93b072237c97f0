"""
Studio Invoicing - Tax invoice generation for subscription payments
"""
__version__ = "1.0.0"
