"""Document signing service.

Generates personalized documents from provider-hosted templates, gates
signing behind a one-time code and stamps the exported PDF with a
PKCS#12 certificate.
"""
