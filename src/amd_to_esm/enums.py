"""
Enumerations for amd-to-esm.

This module defines the ESTree node kinds the rewrite engine inspects and the
categories assigned to call expressions during classification.
"""

from enum import Enum


class NodeType(str, Enum):
  """
  ESTree node kinds consumed by the classifier and emitter.

  Values match the ``type`` attribute produced by the parser, so members
  compare equal to the raw strings.
  """

  PROGRAM = "Program"
  IDENTIFIER = "Identifier"
  LITERAL = "Literal"
  ARRAY_EXPRESSION = "ArrayExpression"
  ARRAY_PATTERN = "ArrayPattern"
  ASSIGNMENT_PATTERN = "AssignmentPattern"
  OBJECT_PATTERN = "ObjectPattern"
  REST_ELEMENT = "RestElement"
  BINARY_EXPRESSION = "BinaryExpression"
  CALL_EXPRESSION = "CallExpression"
  FUNCTION_EXPRESSION = "FunctionExpression"
  BLOCK_STATEMENT = "BlockStatement"
  EXPRESSION_STATEMENT = "ExpressionStatement"
  RETURN_STATEMENT = "ReturnStatement"
  VARIABLE_DECLARATION = "VariableDeclaration"
  VARIABLE_DECLARATOR = "VariableDeclarator"


class CallKind(str, Enum):
  """
  Classification outcome for a ``require`` / ``define`` call expression.
  """

  MODULE_DEFINITION = "module_definition"  # define(fn), define([..], fn), require([..], fn)
  SYNC_REQUIRE = "sync_require"  # require('a')
  SIDE_EFFECT_REQUIRE = "side_effect_require"  # require(['a', 'b'])
  IDENTIFIER_REQUIRE = "identifier_require"  # require(name)
  UNRELATED = "unrelated"
