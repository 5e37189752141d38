"""Example remediation code attached to findings and health issues."""

SECURE_STORAGE = """\
// Use EncryptedSharedPreferences:
val prefs = EncryptedSharedPreferences.create(
    context, "secure_prefs",
    MasterKey.Builder(context)
        .setKeyScheme(MasterKey.KeyScheme.AES256_GCM)
        .build(),
    PrefKeyEncryptionScheme.AES256_SIV,
    PrefValueEncryptionScheme.AES256_GCM
)"""

PARAMETERIZED_QUERY = """\
// Use parameterized query:
val cursor = db.query(
    "users",
    arrayOf("id", "name"),
    "id = ?",
    arrayOf(userId),
    null, null, null
)"""

SECURE_RANDOM = """\
// Use SecureRandom:
val random = java.security.SecureRandom()
val token = ByteArray(32)
random.nextBytes(token)"""

SAFE_NULL = """\
// Safe null handling:
val value = intent.getStringExtra("key") ?: ""
// or
val value = intent.getStringExtra("key")?.let {
    // use it safely
} ?: run {
    // handle null
}"""

PENDING_INTENT_FIX = """\
// Secure PendingIntent:
val intent = Intent(context, MyActivity::class.java)
val pendingIntent = PendingIntent.getActivity(
    context, 0, intent,
    PendingIntent.FLAG_IMMUTABLE
)"""

AES_ENCRYPTION = """\
// Proper AES-GCM encryption:
val cipher = Cipher.getInstance("AES/GCM/NoPadding")
val iv = ByteArray(12)
SecureRandom().nextBytes(iv)
cipher.init(Cipher.ENCRYPT_MODE, key, GCMParameterSpec(128, iv))"""

BUILDCONFIG_SECRET = """\
// Use BuildConfig for secrets:
// In build.gradle:
// buildConfigField "String", "API_KEY", "\\"${project.properties['API_KEY']}\\""
// In gradle.properties:
// API_KEY=your_key_here
// In code:
val apiKey = BuildConfig.API_KEY"""

BROADCAST_FIX = """\
// Secure broadcast receiver:
if (Build.VERSION.SDK_INT >= Build.VERSION_CODES.TIRAMISU) {
    registerReceiver(receiver, filter, Context.RECEIVER_NOT_EXPORTED)
} else {
    LocalBroadcastManager.getInstance(this)
        .registerReceiver(receiver, filter)
}"""

DEEPLINK_VALIDATION = """\
// Validate deep link:
val uri = intent.data ?: return
if (uri.scheme != "https" || uri.host != "myapp.com") {
    return // reject untrusted URIs
}
val path = uri.path ?: return
when {
    path.startsWith("/user/") -> handleUser(uri)
    else -> return // unknown path
}"""


def with_snippet(advice: str, snippet: str) -> str:
    return f"{advice}\n\n{snippet}"


# ---------------------------------------------------------------------------
# Health issue fixes
# ---------------------------------------------------------------------------

FORCE_UNWRAP = """\
// Instead of:
val name = user!!.name

// Use safe call:
val name = user?.name ?: "default"

// Or let block:
user?.let { u ->
    println(u.name)
}"""

RESOURCE_LEAK = """\
// Instead of:
val stream = FileInputStream("file.txt")
val data = stream.read()
stream.close() // might not reach here!

// Use .use {} block:
FileInputStream("file.txt").use { stream ->
    val data = stream.read()
} // auto-closes even on exception"""

STRING_CONCAT_LOOP = """\
// Instead of:
var result = ""
for (item in list) {
    result += item.toString() // O(n²)!
}

// Use buildString:
val result = buildString {
    for (item in list) {
        append(item)
    }
}

// Or joinToString:
val result = list.joinToString("")"""

GLOBAL_SCOPE = """\
// Instead of:
GlobalScope.launch { ... } // Leaks!

// In ViewModel:
viewModelScope.launch { ... }

// In Activity/Fragment:
lifecycleScope.launch { ... }

// In Composable:
LaunchedEffect(key) { ... }"""

THREAD_SLEEP = """\
// Instead of:
Thread.sleep(1000) // Blocks thread!

// Use coroutine delay:
delay(1000) // Suspends, doesn't block"""

SEQUENCE = """\
// Instead of:
list.filter { it > 5 }.map { it * 2 }
// Creates 2 intermediate lists!

// Use sequence:
list.asSequence()
    .filter { it > 5 }
    .map { it * 2 }
    .toList() // Only 1 list created"""

IO_CONTEXT = """\
// Instead of:
fun loadData() {
    val data = File("data.txt").readText()
    // Blocks main thread!
}

// Use IO dispatcher:
suspend fun loadData() = withContext(Dispatchers.IO) {
    File("data.txt").readText()
}"""

REMEMBER_STATE = """\
// Instead of:
@Composable
fun MyScreen() {
    var count = mutableStateOf(0)
    // Resets on recomposition!
}

// Use remember:
@Composable
fun MyScreen() {
    var count by remember { mutableStateOf(0) }
}"""

NULL_CHECK_IDIOMATIC = """\
// Instead of:
if (user != null) {
    println(user.name)
}

// Use let:
user?.let { println(it.name) }

// Or elvis for default:
val name = user?.name ?: "Unknown\""""

DATA_CLASS = """\
// Instead of:
class User(val name: String, val age: Int)

// Use data class (auto equals/hashCode/copy):
data class User(val name: String, val age: Int)"""

INDEX_LOOP = """\
// Instead of:
for (i in 0 until list.size) {
    println(list[i])
}

// Use forEach:
list.forEach { println(it) }

// If you need index:
list.forEachIndexed { i, item ->
    println("$i: $item")
}"""

DEPRECATED_HANDLER = """\
// Instead of:
Handler().postDelayed({ }, 1000)

// Use Looper:
Handler(Looper.getMainLooper()).postDelayed({ }, 1000)

// Or better, use coroutines:
lifecycleScope.launch {
    delay(1000)
    // do work
}"""

VIEW_BINDING = """\
// Instead of:
val tv = findViewById<TextView>(R.id.title)

// Use ViewBinding:
// build.gradle: viewBinding { enabled = true }
private lateinit var binding: ActivityMainBinding

override fun onCreate(savedInstanceState: Bundle?) {
    binding = ActivityMainBinding.inflate(layoutInflater)
    setContentView(binding.root)
    binding.title.text = "Hello"
}"""

RECYCLER_DIFF = """\
// Instead of:
adapter.notifyDataSetChanged() // Redraws all!

// Use ListAdapter with DiffUtil:
class MyAdapter : ListAdapter<Item, VH>(Diff()) {
    class Diff : DiffUtil.ItemCallback<Item>() {
        override fun areItemsTheSame(a: Item, b: Item) =
            a.id == b.id
        override fun areContentsTheSame(a: Item, b: Item) =
            a == b
    }
}
// Then: adapter.submitList(newList)"""

UNSAFE_CAST = """\
// Instead of:
val user = obj as User // Crashes if wrong type!

// Use safe cast:
val user = obj as? User ?: return

// Or with when:
when (obj) {
    is User -> handleUser(obj)
    is Admin -> handleAdmin(obj)
    else -> handleUnknown()
}"""

EMPTY_CATCH = """\
// Instead of:
try { riskyOp() } catch (e: Exception) { }

// Log the error:
try {
    riskyOp()
} catch (e: IOException) {
    Log.e(TAG, "Failed to do X", e)
} catch (e: Exception) {
    Log.e(TAG, "Unexpected error", e)
}"""

LATEINIT_CHECK = """\
// Instead of:
lateinit var data: String
fun use() { println(data) } // Crash if not set!

// Check before use:
if (::data.isInitialized) {
    println(data)
}

// Or use lazy instead:
val data: String by lazy { loadData() }"""

THREAD_SAFETY = """\
// Instead of:
var count = 0 // Not thread-safe!
launch { count++ }
launch { count++ }

// Use atomic:
val count = AtomicInteger(0)
launch { count.incrementAndGet() }

// Or Mutex:
val mutex = Mutex()
launch { mutex.withLock { count++ } }"""

SIDE_EFFECT = """\
// Instead of:
@Composable
fun MyScreen() {
    scope.launch { loadData() } // Runs every recomposition!
}

// Use LaunchedEffect:
@Composable
fun MyScreen() {
    LaunchedEffect(Unit) {
        loadData() // Runs once
    }
}"""

CONTEXT_LEAK = """\
// Instead of:
companion object {
    var context: Context? = null // Leaks Activity!
}

// Use application context:
companion object {
    lateinit var appContext: Context
}
// Set in Application.onCreate():
appContext = applicationContext"""

DIVISION_ZERO = """\
// Instead of:
val avg = total / count // Crash if count == 0!

// Add check:
val avg = if (count > 0) total / count else 0

// Or use takeIf:
val avg = count.takeIf { it > 0 }
    ?.let { total / it } ?: 0"""

BOUNDS_CHECK = """\
// Instead of:
val item = list[index] // Crash if out of bounds!

// Use getOrNull:
val item = list.getOrNull(index)

// Or getOrElse:
val item = list.getOrElse(index) { defaultValue }

// Or check first:
if (index in list.indices) { list[index] }"""

STRING_TEMPLATE = """\
// Instead of:
"Hello " + name + "! Age: " + age

// Use string templates:
"Hello $name! Age: $age"

// For expressions:
"Total: ${items.size} items\""""

BITMAP_SAMPLING = """\
// Instead of:
val bitmap = BitmapFactory.decodeFile(path) // OOM!

// Use sampling:
val options = BitmapFactory.Options().apply {
    inJustDecodeBounds = true
}
BitmapFactory.decodeFile(path, options)
options.inSampleSize = calculateInSampleSize(
    options, reqWidth, reqHeight
)
options.inJustDecodeBounds = false
val bitmap = BitmapFactory.decodeFile(path, options)"""

# Checked in order; the first rule whose keywords all occur in the title wins.
_HEALTH_FIXES: list[tuple[tuple[str, ...], str]] = [
    (("force unwrap",), FORCE_UNWRAP),
    (("!!",), FORCE_UNWRAP),
    (("resource leak",), RESOURCE_LEAK),
    (("unclosed",), RESOURCE_LEAK),
    (("string concatenation", "loop"), STRING_CONCAT_LOOP),
    (("globalscope",), GLOBAL_SCOPE),
    (("thread.sleep",), THREAD_SLEEP),
    (("intermediate",), SEQUENCE),
    (("assequence",), SEQUENCE),
    (("collection",), SEQUENCE),
    (("i/o",), IO_CONTEXT),
    (("background thread",), IO_CONTEXT),
    (("remember",), REMEMBER_STATE),
    (("state without",), REMEMBER_STATE),
    (("non-idiomatic null",), NULL_CHECK_IDIOMATIC),
    (("null check",), NULL_CHECK_IDIOMATIC),
    (("data class",), DATA_CLASS),
    (("index loop",), INDEX_LOOP),
    (("foreach",), INDEX_LOOP),
    (("handler",), DEPRECATED_HANDLER),
    (("viewbinding",), VIEW_BINDING),
    (("findviewbyid",), VIEW_BINDING),
    (("notifydatasetchanged",), RECYCLER_DIFF),
    (("diffutil",), RECYCLER_DIFF),
    (("unsafe cast",), UNSAFE_CAST),
    (("empty catch",), EMPTY_CATCH),
    (("lateinit",), LATEINIT_CHECK),
    (("thread safety",), THREAD_SAFETY),
    (("synchroniz",), THREAD_SAFETY),
    (("side effect",), SIDE_EFFECT),
    (("context leak",), CONTEXT_LEAK),
    (("division",), DIVISION_ZERO),
    (("divide",), DIVISION_ZERO),
    (("index", "bounds"), BOUNDS_CHECK),
    (("string concat",), STRING_TEMPLATE),
    (("bitmap",), BITMAP_SAMPLING),
    (("sampling",), BITMAP_SAMPLING),
    (("raw thread",), GLOBAL_SCOPE),
]


def fix_for_health_issue(title: str) -> str | None:
    """Return example code for a health issue title, or None when no snippet applies."""
    lower = title.lower()
    for keywords, snippet in _HEALTH_FIXES:
        if all(k in lower for k in keywords):
            return snippet
    return None
