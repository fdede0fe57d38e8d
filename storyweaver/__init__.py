# Storyweaver - illustrated children's story generation
