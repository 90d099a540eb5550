"""
Company App - Weighbridge Issuer Settings

Holds the single settings record (company name and address) printed on
every slip. There is no history and no partial update: saving replaces
the whole record.
"""
