"""
Built-in settings schema.
Keys are grouped by dotted prefix; the command line lists them in this order.
"""

from ..models.setting import Setting, SettingInfo

# DNS resolution
DNS_SETTINGS = (
    SettingInfo("dns.local.enabled", Setting.bool_(True), "Resolve names through the local hosts table first"),
    SettingInfo("dns.doh.enabled", Setting.bool_(False), "Use DNS over HTTPS"),
    SettingInfo("dns.doh.server", Setting.string("https://1.1.1.1/dns-query"), "DNS over HTTPS endpoint"),
    SettingInfo("dns.remote.nameservers", Setting.string(""), "Comma-separated nameservers (empty uses the system resolver)"),
    SettingInfo("dns.cache.max_entries", Setting.int_(1000), "Maximum number of cached DNS responses"),
    SettingInfo("dns.cache.ttl.override.enabled", Setting.bool_(False), "Ignore record TTLs and use a fixed lifetime"),
    SettingInfo("dns.cache.ttl.override.seconds", Setting.int_(0), "Fixed cache lifetime in seconds when override is enabled"),
)

# User agent
USERAGENT_SETTINGS = (
    SettingInfo("useragent.default_page", Setting.string("about:blank"), "Page opened in a new tab"),
    SettingInfo("useragent.tab.close_button", Setting.string("right"), "Side of the tab where the close button sits"),
    SettingInfo("useragent.tab.max_opened", Setting.int_(-1), "Maximum number of open tabs (-1 for unlimited)"),
)

# Rendering
RENDERER_SETTINGS = (
    SettingInfo("renderer.opengl.enabled", Setting.bool_(True), "Use OpenGL for rendering"),
    SettingInfo("renderer.cache.enabled", Setting.bool_(True), "Cache rendered layers between frames"),
    SettingInfo("renderer.cache.max_entries", Setting.int_(500), "Maximum number of cached layers"),
    SettingInfo("renderer.zoom.default", Setting.float_(1.0), "Default page zoom factor"),
)

DEFAULT_SCHEMA = DNS_SETTINGS + USERAGENT_SETTINGS + RENDERER_SETTINGS
