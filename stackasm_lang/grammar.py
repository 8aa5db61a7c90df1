STACK_GRAMMAR = r"""
    start: command*

    // --- Commands ---
    ?command: PUSH value            -> push
            | ILOAD NUMBER value    -> iload
            | opcode

    opcode: DUP | SWAP | LOAD | DROP | QUERY | INFO | IF
          | EACH | REDUCE | REVERSE | MAP | FILTER | CALL
          | TOSTR | TONUM
          | ADD | SUB | MUL | DIV | MOD
          | EQ | NOT_EQ | GREATER | GREATER_EQ | LESS | LESS_EQ
          | AND | OR | NOT
          | CONCAT | MATCH | SPLIT | IOTA

    // --- Values ---
    value: NUMBER                               -> number
         | STRING                               -> string
         | BOOLEAN                              -> boolean
         | NIL                                  -> nil
         | LEFT_SQUARE value* RIGHT_SQUARE      -> array
         | LEFT_CURLY command* RIGHT_CURLY      -> function

    // Terminals are produced by stackasm_lang.lexer, never by lark.
    %declare NIL NUMBER STRING BOOLEAN
    %declare LEFT_SQUARE RIGHT_SQUARE LEFT_CURLY RIGHT_CURLY
    %declare PUSH DUP SWAP ILOAD LOAD DROP QUERY INFO IF
    %declare EACH REDUCE REVERSE MAP FILTER CALL TOSTR TONUM
    %declare ADD SUB MUL DIV MOD
    %declare EQ NOT_EQ GREATER GREATER_EQ LESS LESS_EQ
    %declare AND OR NOT CONCAT MATCH SPLIT IOTA
"""
