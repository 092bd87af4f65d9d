"""Handles interactive mode for the WeaR interpreter. Uses cmd as backend."""

import cmd

from wear.core.lexical import Tokenizer
from wear.core.tokens import TokenType
from wear.lang.config import available_languages, get_language
from wear.lang.error import Diagnostics


class Shell(cmd.Cmd):
    """WeaR interactive shell. Every complete input is run as its own program."""
    intro = "WeaR Lang interactive shell\nType 'help' for more information, ':lang CODE' to switch keywords."
    prompt = "wear> "
    secondary_prompt = "... "  # used for line continuations
    _tmp_prompt = "wear> "     # also used for prompt swapping in line continuations
    BARE_COMMANDS = ("help", "exit", "EOF")

    def __init__(self, sess, error_handler, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.error_handler = error_handler

        self._tmp_line = ""

    def default(self, line):
        """Runs arbitrary WeaR code, continuing on the next line while braces are left open."""
        if not self._tmp_line and line.startswith("#"):
            return self.do_lang(line[1:])  # '#id' and '#en' switch languages

        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line + "\n"

            if self.is_open(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            result = self.sess.run(source)
            if not result.success:
                self.error_handler.display(result.diagnostics)

    def is_open(self, source):
        """Whether source leaves a block open. Braces inside strings and comments do not count."""
        tokens = Tokenizer(source, self.sess.config.localizer(), Diagnostics(source)).tokenize()
        kinds = [token.kind for token in tokens]
        return kinds.count(TokenType.LEFT_BRACE) > kinds.count(TokenType.RIGHT_BRACE)

    def do_lang(self, arg):
        """Switches keyword language: lang CODE. Without CODE, shows the current language."""
        code = arg.strip()
        if not code:
            print(f"{self.sess.language_name} ({self.sess.config.code})")
            return

        with self.error_handler:
            self.sess.set_language(code)
            print(f"Language: {self.sess.language_name}")

    def do_langs(self, arg):
        """Lists available keyword languages."""
        for code in available_languages():
            print(f"  {code}  {get_language(code).name}")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        config = self.sess.config
        print("Welcome to WeaR Lang!\n\n"
              "WeaR is a small language whose keywords speak your language. Try it out by typing\n"
              f"'{config.keywords['var']} x = 10', then '{config.keywords['print']} x + 5'.\n\n"
              "Commands:\n"
              "  :lang CODE   switch keyword language (also #CODE)\n"
              "  :langs       list available languages\n"
              "  exit         leave the shell")

    def onecmd(self, line):
        """Only ':command' lines, plus the bare commands, are shell commands. Anything else is WeaR code."""
        command = line.strip()
        if command == "EOF":
            return self.do_EOF("")
        if self._tmp_line:
            return self.default(line)
        if not command:
            return self.emptyline()
        if command in self.BARE_COMMANDS:
            return super().onecmd(command)
        if command.startswith(":"):
            name = command[1:].split(" ", 1)[0]
            if not hasattr(self, "do_" + name):
                print(f"unknown command ':{name}'")
                return False
            return super().onecmd(command[1:])
        return self.default(line)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
