"""Fixed names, coordinates and endpoints shared by the plugin."""


class GrammarKitConstants:
    """Constants used when wiring the generator tasks into a project."""

    GROUP_NAME = "grammarKit"
    PLUGIN_NAME = "grammarkit"

    # Versions
    LATEST_VERSION = "latest"
    JFLEX_DEFAULT_VERSION = "1.9.2"
    MINIMUM_RUNTIME_VERSION = "6.6"
    ASM_ALL_VERSION = "7.0.1"

    # Dependency sets
    GRAMMAR_KIT_CLASS_PATH_CONFIGURATION_NAME = "grammarKitClassPath"
    BOM_CONFIGURATION_NAME = "bom"
    COMPILE_CLASSPATH_CONFIGURATION_NAME = "compileClasspath"
    COMPILE_ONLY_CONFIGURATION_NAME = "compileOnly"

    # Tasks
    GENERATE_LEXER_TASK_NAME = "generateLexer"
    GENERATE_PARSER_TASK_NAME = "generateParser"
    LEXER_MAIN_CLASS = "jflex.Main"
    PARSER_MAIN_CLASS = "org.intellij.grammar.Main"

    # Coordinates
    GRAMMAR_KIT_GROUP = "com.github.JetBrains"
    GRAMMAR_KIT_ARTIFACT = "Grammar-Kit"
    JFLEX_GROUP = "org.jetbrains.intellij.deps.jflex"
    JFLEX_ARTIFACT = "jflex"
    INTELLIJ_PLATFORM_GROUP = "com.jetbrains.intellij.platform"
    INTELLIJ_PLATFORM_MODULES = (
        "indexing-impl",
        "analysis-impl",
        "core-impl",
        "lang-impl",
    )
    ASM_ALL_COORDINATE = f"org.jetbrains.intellij.deps:asm-all:{ASM_ALL_VERSION}"
    PLUGINS_GROUP = "org.jetbrains.plugins"

    # Placeholder values carried over for a downstream consumer of the bom set
    BOM_COORDINATE = "dev.thiagosouto:plugin:1.3.4"
    BOM_EXCLUDE_GROUP = "soutoPackage"
    BOM_EXCLUDE_MODULE = "test1"

    # Endpoints
    GRAMMAR_KIT_LATEST_RELEASE_URL = "https://github.com/JetBrains/Grammar-Kit/releases/latest"
    INTELLIJ_DEPENDENCIES_URL = "https://cache-redirector.jetbrains.com/intellij-dependencies"
    INTELLIJ_RELEASES_URL = "https://cache-redirector.jetbrains.com/intellij-repository/releases"
    GRAMMAR_KIT_RELEASES_DOWNLOAD_URL = "https://github.com/JetBrains/Grammar-Kit/releases/download"
    GRAMMAR_KIT_ARCHIVE_PATTERN = "[revision]/grammar-kit-[revision].zip"
