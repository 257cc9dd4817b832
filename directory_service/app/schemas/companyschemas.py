from .userschemas import ContactDetail


class CompanyDataUpdate(ContactDetail):
    """Contact record of a company: phone, whatsapp, website and social links."""
