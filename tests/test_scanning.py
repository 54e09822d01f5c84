import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from routegen.annotations import lex_comment
from routegen.class_meta import extract_class_name, extract_namespace, extract_qualified_class_name
from routegen.builder import RouteModelBuilder
from routegen.reflection import PhpSourceReflector, mask_spans, preceding_docblock, scan_class_source, source_spans
from php_fixtures import NOT_A_CLASS, POSTS_CONTROLLER, USERS_CONTROLLER


class TestLexComment(unittest.TestCase):
    def test_strips_delimiters_and_gutter(self):
        comment = "/**\n * name=users\n *\n *   @route(\n * )\n */"
        self.assertEqual(lex_comment(comment), ["name=users", "@route(", ")"])

    def test_single_line_docblock(self):
        self.assertEqual(lex_comment("/** name=users */"), ["name=users"])

    def test_absent_comment(self):
        self.assertEqual(lex_comment(None), [])
        self.assertEqual(lex_comment(""), [])

    def test_keeps_inner_text_verbatim(self):
        lines = lex_comment("/**\n * $self->isAdmin()\n * assert('id', '\\d+')\n */")
        self.assertEqual(lines, ["$self->isAdmin()", "assert('id', '\\d+')"])


class TestClassMeta(unittest.TestCase):
    def test_qualified_name(self):
        self.assertEqual(extract_qualified_class_name(USERS_CONTROLLER), "App\\Controller\\UsersController")

    def test_final_class(self):
        self.assertEqual(extract_class_name(POSTS_CONTROLLER), "PostsController")

    def test_without_namespace(self):
        self.assertEqual(extract_qualified_class_name("<?php\nclass FooController {}\n"), "FooController")

    def test_braced_namespace(self):
        text = "<?php\nnamespace App\\Http {\nabstract class BaseController {}\n}\n"
        self.assertEqual(extract_namespace(text), "App\\Http")
        self.assertEqual(extract_qualified_class_name(text), "App\\Http\\BaseController")

    def test_no_class(self):
        self.assertIsNone(extract_qualified_class_name(NOT_A_CLASS))

    def test_class_word_in_docblock_is_ignored(self):
        text = "<?php\n/**\n * class Fake\n */\nclass RealController {}\n"
        self.assertEqual(extract_class_name(text), "RealController")


class TestReflection(unittest.TestCase):
    def test_class_comment(self):
        source = scan_class_source("App\\Controller\\UsersController", USERS_CONTROLLER)
        self.assertIsNotNone(source)
        self.assertIn("name=users", source.comment)
        self.assertTrue(source.comment.startswith("/**"))

    def test_public_methods_only(self):
        source = scan_class_source("App\\Controller\\UsersController", USERS_CONTROLLER)
        names = [name for name, _ in source.methods]
        self.assertEqual(names, ["listAction", "showAction", "ping"])

    def test_method_comments(self):
        source = scan_class_source("App\\Controller\\UsersController", USERS_CONTROLLER)
        comments = dict(source.methods)
        self.assertIn("url=/users/{id}", comments["showAction"])
        self.assertNotIn("url=/users/{id}", comments["listAction"])
        self.assertEqual(comments["ping"], "")

    def test_nested_functions_are_not_methods(self):
        text = (
            "<?php\nclass NestedController\n{\n"
            "    public function outer()\n    {\n"
            "        function inner() {}\n"
            "        return 1;\n    }\n"
            "    function implicitPublic() {}\n}\n"
        )
        source = scan_class_source("NestedController", text)
        self.assertEqual([n for n, _ in source.methods], ["outer", "implicitPublic"])

    def test_attributes_between_docblock_and_method(self):
        text = "<?php\nclass A {\n    /** name=x */\n    #[Deprecated]\n    public function a() {}\n}\n"
        source = scan_class_source("A", text)
        self.assertEqual(source.methods, [("a", "/** name=x */")])

    def test_preceding_docblock_requires_adjacency(self):
        text = "/** doc */\n$x = 1;\nfunction f() {}"
        self.assertEqual(preceding_docblock(text, text.index("function")), "")

    def test_plain_block_comment_is_not_a_docblock(self):
        text = (
            "<?php\n/**\n * name=users\n */\nclass UsersController\n{\n"
            "    /**\n     * @route(\n     *     method=GET\n     *     url=/users\n     * )\n     */\n"
            "    public function listAction() {}\n\n"
            "    /* helper */\n"
            "    public function helperAction() {}\n}\n"
        )
        comments = dict(scan_class_source("UsersController", text).methods)
        self.assertTrue(comments["listAction"].startswith("/**"))
        self.assertIn("url=/users", comments["listAction"])
        self.assertEqual(comments["helperAction"], "")

        builder = RouteModelBuilder()
        builder.add_source(text)
        actions = builder.build().controllers["users"].actions
        self.assertEqual(actions["helperAction"].routes, [])
        self.assertEqual([r.url for r in actions["listAction"].routes], ["/users"])

    def test_docblock_may_contain_comment_opener(self):
        text = "<?php\nclass A {\n    /** url=/files/* */\n    public function files() {}\n}\n"
        self.assertEqual(scan_class_source("A", text).methods, [("files", "/** url=/files/* */")])

    def test_braces_in_strings_do_not_hide_methods(self):
        text = (
            "<?php\nclass OpenController\n{\n"
            "    public function openAction() { return \"{\"; }\n"
            "    public function closeAction() { return '}}'; }\n"
            "    /** url=/list */\n"
            "    public function listAction() {}\n}\n"
            "function outside() {}\n"
        )
        source = scan_class_source("OpenController", text)
        self.assertEqual(
            source.methods,
            [("openAction", ""), ("closeAction", ""), ("listAction", "/** url=/list */")],
        )

    def test_braces_in_line_comments_do_not_hide_methods(self):
        text = (
            "<?php\nclass CommentController\n{\n"
            "    public function a()\n    {\n        // }\n        # {\n        return 1;\n    }\n"
            "    /** url=/b */\n"
            "    public function b() {}\n}\n"
        )
        source = scan_class_source("CommentController", text)
        self.assertEqual(source.methods, [("a", ""), ("b", "/** url=/b */")])

    def test_heredoc_body_is_not_code(self):
        text = (
            "<?php\nclass DocController\n{\n"
            "    public function a()\n    {\n        return <<<EOT\n{ function fake() {}\nEOT;\n    }\n"
            "    public function b() {}\n}\n"
        )
        self.assertEqual([n for n, _ in scan_class_source("DocController", text).methods], ["a", "b"])

    def test_source_spans(self):
        text = "$a = '{'; // }\n/* x */ $b = \"\\\"}\";\n"
        kinds = [kind for kind, _, _ in source_spans(text)]
        self.assertEqual(kinds, ["string", "line", "block", "string"])
        masked = mask_spans(text, source_spans(text))
        self.assertEqual(len(masked), len(text))
        self.assertNotIn("{", masked)
        self.assertNotIn("}", masked)
        self.assertEqual(masked.count("\n"), 2)

    def test_attribute_is_not_a_line_comment(self):
        self.assertEqual(source_spans("#[Route('/x')]\n"), [("string", 8, 12)])

    def test_reflector_lookup(self):
        reflector = PhpSourceReflector()
        reflector.index_source("App\\Controller\\PostsController", POSTS_CONTROLLER)
        self.assertIn("name=posts", reflector.get_class_comment("App\\Controller\\PostsController"))
        self.assertEqual(
            [n for n, _ in reflector.list_public_methods("App\\Controller\\PostsController")],
            ["indexAction"],
        )
        self.assertEqual(reflector.get_class_comment("Unknown"), "")
        self.assertEqual(reflector.list_public_methods("Unknown"), [])

    def test_reflector_ignores_sources_without_class(self):
        reflector = PhpSourceReflector()
        self.assertIsNone(reflector.index_source("X", NOT_A_CLASS))


if __name__ == "__main__":
    unittest.main()
