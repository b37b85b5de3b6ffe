from trie_lookup.app import main

main()
