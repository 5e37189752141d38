"""Static rule tables used by the vulnerability detectors.

Rules are data: adding a pattern here never requires touching checker control
flow. Patterns compile at import time, so a malformed regex fails loudly on
import rather than during a scan.
"""

import re

RULES_VERSION = "2024.1"

# ---------------------------------------------------------------------------
# Critical
# ---------------------------------------------------------------------------

HARDCODED_SECRETS: list[dict] = [
    {
        "title": "Hardcoded API Key",
        "pattern": re.compile(
            r'(?:val|var|const)\s+\w*(?:api[_]?key|apiKey|API_KEY)\w*\s*=\s*"[^"]{8,}"',
            re.IGNORECASE,
        ),
        "description": "API key embedded in source code. Can be extracted via APK decompilation.",
    },
    {
        "title": "Hardcoded Password",
        "pattern": re.compile(
            r'(?:val|var|const)\s+\w*(?:password|passwd|pwd)\w*\s*=\s*"[^"]{3,}"',
            re.IGNORECASE,
        ),
        "description": "Password embedded in source code. Never hardcode credentials.",
    },
    {
        "title": "Hardcoded Secret/Token",
        "pattern": re.compile(
            r'(?:val|var|const)\s+\w*(?:secret|token|auth|credential|private[_]?key)\w*\s*=\s*"[^"]{8,}"',
            re.IGNORECASE,
        ),
        "description": "Sensitive token embedded in code. Use secure storage instead.",
    },
    {
        "title": "OpenAI API Key",
        "pattern": re.compile(r'"sk-[a-zA-Z0-9]{20,}"'),
        "description": "OpenAI API key detected. This grants access to paid API.",
    },
    {
        "title": "Google API Key",
        "pattern": re.compile(r'"AIza[a-zA-Z0-9_-]{35,}"'),
        "description": "Google Cloud API key detected. Can incur charges if leaked.",
    },
    {
        "title": "GitHub Personal Access Token",
        "pattern": re.compile(r'"ghp_[a-zA-Z0-9]{36,}"'),
        "description": "GitHub PAT detected. Grants repository access.",
    },
    {
        "title": "AWS Access Key",
        "pattern": re.compile(r'"AKIA[A-Z0-9]{16,}"'),
        "description": "AWS access key detected. Can access cloud resources.",
    },
    {
        "title": "Slack Token",
        "pattern": re.compile(r'"xox[bsrap]-[a-zA-Z0-9-]{10,}"'),
        "description": "Slack API token detected. Grants workspace access.",
    },
    {
        "title": "Private Key",
        "pattern": re.compile(r'"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"'),
        "description": "Private key embedded in code. Extremely sensitive.",
    },
    {
        "title": "MongoDB Connection String",
        "pattern": re.compile(r'"mongodb(?:\+srv)?://[^"]+:[^"]+@[^"]+"'),
        "description": "Database credentials in connection string.",
    },
    {
        "title": "PostgreSQL Connection String",
        "pattern": re.compile(r'"postgres(?:ql)?://[^"]+:[^"]+@[^"]+"'),
        "description": "Database credentials in connection string.",
    },
]

# Literal fragments that mark a secret-looking assignment as a placeholder.
SECRET_PLACEHOLDERS = ('""', '"TODO"', '"null"', '"example"', '"your-', '"<', '"{')

CONCAT_MARKERS = ("+", "${", "$")

SQL_KEYWORDS = ("SELECT", "INSERT", "UPDATE", "DELETE", "DROP", "CREATE TABLE", "ALTER", "TRUNCATE")
SQL_BUILDERS = ("StringBuilder", "buildString", "format(")

COMMAND_SINKS = ("Runtime.getRuntime().exec", "ProcessBuilder(", "exec(", "Process")

FILE_SINKS = ("File(", "FileInputStream(", "FileOutputStream(", "FileReader(", "FileWriter(", "Paths.get(")
PATH_VALIDATORS = ("canonicalPath", "normalize", "..", "contains(", "startsWith(")

INJECTION_RULES: list[dict] = [
    {
        "title": "LDAP Injection Risk",
        "keywords": ("ldap://", "ldaps://", "LdapContext", "DirContext"),
        "description": "LDAP query built with dynamic input. Could leak directory information.",
        "fix": "Escape LDAP special characters and use parameterized search filters.",
    },
    {
        "title": "XPath Injection Risk",
        "keywords": ("xpath", "XPath", "selectNodes", "selectSingleNode"),
        "description": "XPath query built with dynamic input. Could extract unauthorized data.",
        "fix": "Use XPath variable resolvers instead of building expressions from strings.",
    },
]

# (sink, kind); kinds mentioning "Java" are native serialization.
DESERIALIZATION_SINKS = (
    ("ObjectInputStream(", "Java deserialization"),
    ("readObject()", "Java deserialization"),
    ("Serializable", "Java Serializable interface"),
    ("readUnshared()", "Java deserialization"),
    ("Gson().fromJson(", "JSON deserialization"),
    ("ObjectMapper().readValue(", "Jackson deserialization"),
    ("Moshi", "Moshi deserialization"),
)
UNTRUSTED_SOURCE_HINTS = ("socket", "http", "input", "stream", "request", "intent")

XML_PARSERS = (
    "DocumentBuilderFactory", "SAXParserFactory", "XMLInputFactory",
    "TransformerFactory", "SchemaFactory", "XMLReader", "SAXBuilder", "SAXReader",
)
XXE_PROTECTIONS = (
    "FEATURE_SECURE_PROCESSING", "DISALLOW_DOCTYPE", "setFeature",
    "setExpandEntityReferences(false)",
)

# ---------------------------------------------------------------------------
# High
# ---------------------------------------------------------------------------

SENSITIVE_LOG_KEYWORDS = (
    "password", "passwd", "pwd", "secret", "token", "api_key", "apikey",
    "api-key", "credential", "auth", "session", "cookie", "bearer",
    "authorization", "private", "ssn", "social_security", "credit_card",
    "card_number", "cvv", "pin", "otp",
)

LOG_FUNCTIONS = [
    re.compile(r"Log\.[dewivwtf]\s*\("),
    re.compile(r"println\s*\("),
    re.compile(r"print\s*\("),
    re.compile(r"Timber\.[dewiv]\s*\("),
    re.compile(r"logger\.\w+\s*\(", re.IGNORECASE),
    re.compile(r"console\.log\s*\("),
    re.compile(r"System\.out\.print"),
]

SSL_BYPASS_INDICATORS = (
    "TrustAllCerts", "ALLOW_ALL_HOSTNAME_VERIFIER", "trustAllCertificates",
    "setHostnameVerifier", "X509TrustManager", "disableSslVerification",
    "AcceptAllCertificates", "InsecureTrustManager", "trustAll",
    "ALLOW_ALL_HOSTNAMES", "NoopHostnameVerifier", "checkServerTrusted",
    "SSLSocketFactory.ALLOW_ALL",
)

WEBVIEW_DANGEROUS: list[dict] = [
    {
        "pattern": "setJavaScriptEnabled(true)",
        "title": "JavaScript Enabled in WebView",
        "description": "JavaScript in WebView can lead to XSS if loading untrusted content.",
    },
    {
        "pattern": "addJavascriptInterface",
        "title": "JavaScript Interface Exposed",
        "description": "Native methods exposed to JavaScript. Malicious web content can call app methods.",
    },
    {
        "pattern": "setAllowFileAccess(true)",
        "title": "WebView File Access Enabled",
        "description": "WebView can access local files. Could leak app data to malicious pages.",
    },
    {
        "pattern": "setAllowUniversalAccessFromFileURLs(true)",
        "title": "WebView Universal File Access",
        "description": "Extremely dangerous. File URLs can access any origin.",
    },
    {
        "pattern": "setAllowFileAccessFromFileURLs(true)",
        "title": "WebView Cross-File Access",
        "description": "File URLs can access other file URLs. Security risk.",
    },
]

INSECURE_HTTP_PATTERN = re.compile(
    r'"http://(?!localhost|127\.0\.0\.1|10\.|192\.168\.|172\.(?:1[6-9]|2[0-9]|3[01])\.)'
)

EMPTY_CATCH_PATTERN = re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}")
LINE_COMMENT_PATTERN = re.compile(r"//.*")

DEBUGGABLE_PATTERN = {
    "pattern": 'android:debuggable="true"',
    "title": "Debuggable Build",
    "description": "App is debuggable. Attackers can attach debugger and inspect runtime.",
}

REDIRECT_SINKS = (
    ("startActivity(", "Activity launch"),
    ("Intent(Intent.ACTION_VIEW", "View intent"),
    ("Uri.parse(", "URI parsing"),
    ("CustomTabsIntent", "Custom tab"),
    ("openBrowser(", "Browser open"),
    ("loadUrl(", "WebView URL load"),
)
URL_VALIDATORS = ("startsWith(", "contains(", "allowlist", "whitelist", "isValidUrl", "Uri.parse")

BROADCAST_PROTECTIONS = ("permission", "RECEIVER_NOT_EXPORTED", "LocalBroadcastManager")
PROVIDER_PERMISSIONS = ("permission", "readPermission", "writePermission", "grantUriPermissions")
CLEARTEXT_FLAGS = ('cleartextTrafficPermitted="true"', 'usesCleartextTraffic="true"')

EXPORTED_COMPONENT_PATTERNS: list[dict] = [
    {
        "pattern": 'android:exported="true"',
        "title": "Exported Component",
        "description": "Component is accessible by other apps. Verify this is intended.",
    },
    {
        "pattern": 'exported="true"',
        "title": "Exported Component",
        "description": "Component is accessible by other apps. Verify this is intended.",
    },
]

# ---------------------------------------------------------------------------
# Medium
# ---------------------------------------------------------------------------

# Ordered: the first algorithm named on a line wins.
WEAK_CRYPTO_ALGORITHMS: dict[str, str] = {
    "MD5": "MD5 is cryptographically broken. Collisions can be generated in seconds.",
    "SHA1": "SHA-1 is deprecated. Collision attacks are practical.",
    "SHA-1": "SHA-1 is deprecated. Collision attacks are practical.",
    "DES": "DES uses 56-bit keys. Can be brute-forced in hours.",
    "3DES": "Triple DES is deprecated. Use AES instead.",
    "RC4": "RC4 has critical biases. Broken in practice.",
    "RC2": "RC2 is obsolete and weak.",
    "Blowfish": "Blowfish has 64-bit blocks. Vulnerable to birthday attacks.",
    "ECB": "ECB mode doesn't hide patterns. Never use for encryption.",
    "PKCS1Padding": "PKCS#1 v1.5 padding is vulnerable to Bleichenbacher attacks.",
}

CRYPTO_CONTEXTS = (
    "getInstance", "MessageDigest", "Cipher", "digest", "encrypt",
    "decrypt", "SecretKey", "KeyGenerator", "Mac.",
)

INSECURE_RANDOM_PATTERNS = [
    re.compile(r"java\.util\.Random\s*\("),
    re.compile(r"Random\s*\(\s*\)(?!.*Secure)"),
    re.compile(r"Math\.random\s*\("),
    re.compile(r"kotlin\.random\.Random(?!\.Secure)"),
]
RANDOM_SENSITIVE_CONTEXT = re.compile(r"token|key|password|secret|nonce|salt|iv|otp", re.IGNORECASE)

SHARED_PREFS_WRITE = re.compile(r"\.(?:putString|putInt|putLong|putBoolean)\s*\(")
SHARED_PREFS_SENSITIVE_KEYS = (
    "password", "passwd", "pwd", "token", "secret", "key", "credential",
    "session", "auth", "api_key", "apikey", "private", "bearer",
)

DANGEROUS_FILE_MODES = ("MODE_WORLD_READABLE", "MODE_WORLD_WRITEABLE", "MODE_WORLD_WRITABLE")

HARDCODED_IP_PATTERN = re.compile(r'"(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})(?::\d+)?"')
LOCAL_IP_PREFIXES = ("127.", "0.0.0.0", "10.", "192.168.") + tuple(
    f"172.{n}." for n in range(16, 32)
)

FORCE_UNWRAP_PATTERN = re.compile(r"!!\s*[.\[(]")

CLIPBOARD_CALLS = ("ClipboardManager", "setPrimaryClip", "ClipData.newPlainText")
CLIPBOARD_SENSITIVE = ("password", "token", "secret", "key", "credential", "otp")

EXTERNAL_STORAGE_CALLS = (
    ("getExternalFilesDir", "External app directory"),
    ("getExternalStorageDirectory", "External storage root"),
    ("Environment.getExternalStorageDirectory", "External storage root"),
    ("getExternalCacheDir", "External cache"),
    ("EXTERNAL_STORAGE", "External storage constant"),
)
EXTERNAL_STORAGE_SENSITIVE = ("password", "token", "key", "secret", "credential", "user")

DEEPLINK_SOURCES = ("intent.data", "intent?.data", "getData()")
DEEPLINK_VALIDATORS = ("host", "scheme", "authority", "if", "when", "require", "check(")

KEY_GENERATORS = ("KeyGenerator", "KeyPairGenerator", "initialize(")
KEY_SIZE_PATTERN = re.compile(r"initialize\s*\(\s*(\d+)")

IV_CONSTRUCTORS = ("IvParameterSpec(", "GCMParameterSpec(")
IV_LITERALS = ("byteArrayOf(", "ByteArray(")
IV_STRING_LITERAL = re.compile(r'"[^"]{8,}"')

# ---------------------------------------------------------------------------
# Low
# ---------------------------------------------------------------------------

BROAD_EXCEPTION_PATTERNS = [
    re.compile(r"catch\s*\(\s*\w+\s*:\s*Exception\s*\)"),
    re.compile(r"catch\s*\(\s*\w+\s*:\s*Throwable\s*\)"),
    re.compile(r"catch\s*\(\s*e\s*:\s*Exception\s*\)"),
    re.compile(r"catch\s*\(Exception\s+\w+\)"),
]

SECURITY_TODO_PATTERN = re.compile(r"(?://|/\*)\s*(?:TODO|FIXME|HACK|XXX|BUG)", re.IGNORECASE)
SECURITY_TODO_KEYWORDS = (
    "security", "auth", "password", "encrypt", "decrypt", "permission",
    "token", "validate", "sanitize", "escape", "injection", "xss",
    "csrf", "ssl", "tls", "certificate", "vulnerability", "unsafe",
)

INTENT_DATA_PATTERNS = [
    re.compile(r"getStringExtra\s*\("),
    re.compile(r"getIntExtra\s*\("),
    re.compile(r"getLongExtra\s*\("),
    re.compile(r"getBooleanExtra\s*\("),
    re.compile(r"getParcelableExtra\s*\("),
    re.compile(r"getSerializableExtra\s*\("),
    re.compile(r"getData\s*\(\s*\)"),
    re.compile(r"intent\.data"),
]

VALIDATION_INDICATORS = (
    "if", "?:", "?.", "require", "check", "isNullOrEmpty", "isNullOrBlank",
    "isEmpty", "isBlank", "?.let", "takeIf", "takeUnless", "when",
)

OBFUSCATION_DISABLED = ("minifyEnabled false", "minifyEnabled=false")

REFLECTION_CALLS = (
    ("Class.forName(", "Dynamic class loading via reflection"),
    (".getDeclaredMethod(", "Reflective method access"),
    (".getDeclaredField(", "Reflective field access"),
    ("::class.java", "Kotlin reflection"),
    (".setAccessible(true)", "Bypassing access control via reflection"),
)

DYNAMIC_LOADERS = (
    ("DexClassLoader(", "Loading external DEX code"),
    ("PathClassLoader(", "Loading external classes"),
    ("loadLibrary(", "Loading native library"),
    ("System.load(", "Loading native code from path"),
    ("InMemoryDexClassLoader(", "Loading DEX from memory"),
)

BACKUP_DANGEROUS: list[dict] = [
    {
        "pattern": 'android:allowBackup="true"',
        "title": "Backup Enabled",
        "description": "App data can be backed up. Sensitive data may be extracted via ADB.",
    },
    {
        "pattern": 'allowBackup="true"',
        "title": "Backup Enabled",
        "description": "App data can be backed up. Sensitive data may be extracted via ADB.",
    },
]

DANGEROUS_PERMISSIONS = (
    "READ_SMS", "RECEIVE_SMS", "SEND_SMS", "READ_CALL_LOG", "WRITE_CALL_LOG",
    "READ_CONTACTS", "WRITE_CONTACTS", "RECORD_AUDIO", "CAMERA",
    "ACCESS_FINE_LOCATION", "READ_EXTERNAL_STORAGE", "WRITE_EXTERNAL_STORAGE",
)
