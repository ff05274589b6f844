"""
Faults module behavioral tests (codes, options, rendering, triggering).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import IsolatedAsyncioTestCase, TestCase

from rich.console import Console
from rich.panel import Panel

from fakes import message
from helmsman import Argument, Locale
from helmsman.faults import *


class FaultCodeTest(TestCase):

    def testStableValues(self):
        self.assertEqual(FaultCode.MALFORMED_DEFINITION, 10101)
        self.assertEqual(FaultCode.MISSING_PERMISSIONS, 12101)
        self.assertEqual(FaultCode.INVALID_ARGUMENT_TYPE, 13102)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.NO_SUBCOMMAND.normalize(), "11101")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.GUARD_REJECTED))
        with self.assertRaises(TypeError):
            getdoc(12102)


class CommandExceptionTest(TestCase):

    def testOptionsMergeDefaults(self):
        fault = MissingArgumentError("missing", argument=Argument("member", "user"))
        self.assertEqual(fault.options["code"], FaultCode.MISSING_ARGUMENT)
        self.assertEqual(fault.options["index"], 0)
        self.assertEqual(str(fault), "missing")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            NoSubcommandError("x").options["code"] = 0  # NOQA

    def testReplaceMergesOptions(self):
        fault = MissingArgumentError("missing", argument=Argument("member", "user"))
        replaced = fault.__replace__(index=3)
        self.assertIsInstance(replaced, MissingArgumentError)
        self.assertEqual(replaced.options["index"], 3)
        self.assertEqual(replaced.message, "missing")
        self.assertEqual(fault.options["index"], 0)

    def testRenderArgumentFaults(self):
        locale = Locale()
        argument = Argument("member", "user", "string")
        self.assertEqual(
            MissingArgumentError(argument=argument, index=1).render(locale),
            "Argument member at position 2 is required."
        )
        self.assertEqual(
            InvalidArgumentTypeError(argument=argument, index=0).render(locale),
            "Argument member at position 1 must be one of: user, text"
        )

    def testRenderPermissionFaults(self):
        locale = Locale()
        self.assertEqual(
            MissingPermissionsError(listing="Speak").render(locale),
            "You are missing the following server permissions: Speak"
        )
        self.assertEqual(
            MissingPermissionsError(listing="Speak", channel="voice").render(locale),
            "You are missing the following permissions in #voice: Speak"
        )

    def testRenderDefaultsToMessage(self):
        self.assertEqual(MalformedDefinitionError("bad tree").render(Locale()), "bad tree")

    def testRichPanel(self):
        fault = UnknownArgumentTypeError("unknown argument type 'colour'")
        self.assertIsInstance(fault.__rich__(), Panel)

        console = Console(record=True, width=100)
        console.print(fault)
        output = console.export_text()
        self.assertIn("10102", output)
        self.assertIn("Unknown Argument Type", output)


class TriggerTest(IsolatedAsyncioTestCase):

    async def testRepliesOnceWithOptions(self):
        msg = message()
        await trigger(MissingPermissionsError("missing"), msg, Locale(), listing="Kick Members")
        self.assertEqual(msg.replies, ["You are missing the following server permissions: Kick Members"])

    async def testLogsTheNormalizedCode(self):
        with self.assertLogs("helmsman.faults", "INFO") as logs:
            await trigger(NoSubcommandError("needs a subcommand"), message(), Locale())
        self.assertIn("11101", logs.output[0])

    async def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            await trigger(ValueError("plain"), message(), Locale())


if __name__ == "__main__":
    unittest.main()
