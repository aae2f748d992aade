"""Source snippets shared by inventory and coverage tests."""

# Ten lines: three comment-only, two blank, five of code.
GO_SOURCE = """\
package main

// Package comment.
import "fmt"
/* block comment */

// another comment
func main() {
\tfmt.Println("// not a comment")
}
"""
